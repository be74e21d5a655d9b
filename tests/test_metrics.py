import numpy as np
import pytest

from omicnet.evaluation.metrics import feature_recovery, latent_correlation, linked_edge_fraction
from omicnet.network.edges import cross_edges, empty_edges


class TestFeatureRecovery:

    def test_perfect(self):
        assert feature_recovery(["a", "b"], ["a", "b"]) == {"precision": 1.0, "recall": 1.0, "f1": 1.0}

    def test_partial(self):
        res = feature_recovery(["a", "b", "c", "d"], ["a", "b"])
        assert res["precision"] == 0.5
        assert res["recall"] == 1.0
        assert res["f1"] == pytest.approx(2 / 3)

    def test_empty(self):
        assert feature_recovery([], ["a"]) == {"precision": 0.0, "recall": 0.0, "f1": 0.0}


class TestLinkedEdgeFraction:

    @pytest.fixture
    def edges(self):
        return cross_edges({"G1": 0.5, "G9": 0.4}, {"M1": 0.3, "M9": 0.2})

    def test_any(self, edges):
        assert linked_edge_fraction(edges, ["G1"], ["M1"], mode="any") == 0.75

    def test_both(self, edges):
        assert linked_edge_fraction(edges, ["G1"], ["M1"], mode="both") == 0.25

    def test_empty(self):
        assert linked_edge_fraction(empty_edges(), ["G1"], ["M1"]) == 0.0

    def test_bad_mode(self, edges):
        with pytest.raises(ValueError):
            linked_edge_fraction(edges, [], [], mode="either")


def test_latent_correlation(stub_result):
    t = stub_result.variate("X", 1).to_numpy()
    assert latent_correlation(stub_result, -2 * t + 1) == pytest.approx(1.0)
    with pytest.raises(ValueError):
        latent_correlation(stub_result, [1.0, 2.0])
