"""
Exception hierarchy for the integration pipeline.

All three failures are local and synchronous: nothing is mutated before they
are raised, so callers can adjust parameters and simply call again.
"""


class OmicNetError(Exception):
    """Base class for pipeline failures."""


class AlignmentError(OmicNetError):
    """The two matrices share no sample identifiers."""


class FittingError(OmicNetError):
    """The sparse decomposition could not be fitted on the given inputs."""


class EmptySelectionError(OmicNetError):
    """Sparsity settings left no selected feature in one of the blocks."""
