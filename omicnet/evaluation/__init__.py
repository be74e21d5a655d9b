from .metrics import feature_recovery, linked_edge_fraction, latent_correlation

__all__ = ["feature_recovery", "linked_edge_fraction", "latent_correlation"]
