import itertools
import pyarrow as pa
import pytest

from omicnet.errors import EmptySelectionError
from omicnet.network.edges import (
    EDGE_SCHEMA,
    NetworkBuilder,
    cross_edges,
    empty_edges,
    filter_edges,
    scca_to_network,
    top_edges,
)


class TestCrossEdges:

    def test_full_cross_product_at_zero_threshold(self):
        wx = {"G1": 0.5, "G2": -0.2, "G3": 0.0, "G4": 0.1}
        wy = {"M1": 0.3, "M2": 0.0, "M3": -0.7}
        edges = cross_edges(wx, wy, weight_threshold=0.0)
        assert edges.num_rows == 3 * 2
        pairs = list(zip(edges.column("feature_x").to_pylist(), edges.column("feature_y").to_pylist()))
        assert pairs == list(itertools.product(["G1", "G2", "G4"], ["M1", "M3"]))

    def test_schema(self):
        edges = cross_edges({"a": 1.0}, {"b": 1.0})
        assert edges.schema == EDGE_SCHEMA

    def test_weight_and_sign(self):
        wx = {"G1": 0.5, "G2": -0.2}
        wy = {"M1": 0.3, "M2": -0.7}
        for row in cross_edges(wx, wy).to_pylist():
            product = wx[row["feature_x"]] * wy[row["feature_y"]]
            assert row["weight_product"] == pytest.approx(product)
            assert row["interaction_type"] == ("Positive" if product > 0 else "Negative")

    def test_threshold_filter(self):
        wx = {"G1": 0.5, "G2": -0.2, "G3": 0.05}
        wy = {"M1": 0.3, "M2": -0.7}
        edges = cross_edges(wx, wy, weight_threshold=0.1)
        weights = edges.column("weight_product").to_pylist()
        assert all(abs(w) >= 0.1 for w in weights)
        expected = sum(1 for a, b in itertools.product(wx.values(), wy.values()) if abs(a * b) >= 0.1)
        assert edges.num_rows == expected

    def test_threshold_is_inclusive(self):
        edges = cross_edges({"G1": 0.5}, {"M1": 0.5}, weight_threshold=0.25)
        assert edges.num_rows == 1

    def test_empty_after_filter_is_not_an_error(self):
        edges = cross_edges({"G1": 0.01}, {"M1": 0.01}, weight_threshold=0.5)
        assert edges.num_rows == 0
        assert edges.schema == EDGE_SCHEMA

    def test_empty_selection_x(self):
        with pytest.raises(EmptySelectionError, match="block X"):
            cross_edges({"G1": 0.0, "G2": 0.0}, {"M1": 0.4})

    def test_empty_selection_y(self):
        with pytest.raises(EmptySelectionError, match="block Y"):
            cross_edges({"G1": 0.3}, {})

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            NetworkBuilder(weight_threshold=-0.1)

    def test_non_finite_weight_rejected(self):
        with pytest.raises(ValueError, match="Non-finite"):
            cross_edges({"G1": float("nan")}, {"M1": 0.4})

    def test_shared_connection_left_clean(self, conn):
        cross_edges({"G1": 0.3}, {"M1": 0.4}, conn=conn)
        cross_edges({"G2": 0.3}, {"M2": 0.4}, conn=conn)
        with pytest.raises(Exception):
            conn.execute("SELECT * FROM _weights_x")
        assert conn.views == {}


class TestSccaToNetwork:

    def test_component_one(self, stub_result):
        edges = scca_to_network(stub_result, comp_select=1, weight_threshold=0.0)
        rows = edges.to_pylist()
        assert [(r["feature_x"], r["feature_y"]) for r in rows] == [("G1", "M1"), ("G1", "M3"), ("G3", "M1"), ("G3", "M3")]
        assert [r["interaction_type"] for r in rows] == ["Positive", "Negative", "Negative", "Positive"]
        assert rows[2]["weight_product"] == pytest.approx(-0.4)

    def test_cardinality_matches_selection(self, stub_result):
        edges = scca_to_network(stub_result, comp_select=1, weight_threshold=0.0)
        n_x = len(stub_result.selected_features("X", 1))
        n_y = len(stub_result.selected_features("Y", 1))
        assert edges.num_rows == n_x * n_y

    def test_threshold(self, stub_result):
        edges = scca_to_network(stub_result, comp_select=1, weight_threshold=0.07)
        assert sorted(round(w, 6) for w in edges.column("weight_product").to_pylist()) == [-0.4, 0.08, 0.3]

    def test_empty_component_raises(self, stub_result):
        with pytest.raises(EmptySelectionError, match="Component 2"):
            scca_to_network(stub_result, comp_select=2)

    def test_result_untouched(self, stub_result):
        before = stub_result.loadings["X"].copy()
        scca_to_network(stub_result, comp_select=1, weight_threshold=0.0)
        assert stub_result.loadings["X"].equals(before)

    def test_invalid_component(self, stub_result):
        with pytest.raises(ValueError):
            scca_to_network(stub_result, comp_select=3)

    def test_deterministic(self, stub_result):
        a = scca_to_network(stub_result, comp_select=1, weight_threshold=0.0)
        b = scca_to_network(stub_result, comp_select=1, weight_threshold=0.0)
        assert a.equals(b)


class TestEdgeRefiltering:

    @pytest.fixture
    def edges(self):
        return cross_edges({"G1": 0.5, "G2": -0.2, "G3": 0.9}, {"M1": 0.3, "M2": -0.7}, weight_threshold=0.0)

    def test_filter_returns_new_table(self, edges):
        filtered = filter_edges(edges, 0.2)
        assert filtered is not edges
        assert edges.num_rows == 6
        assert all(abs(w) >= 0.2 for w in filtered.column("weight_product").to_pylist())
        assert filtered.num_rows == 3

    def test_filter_rejects_negative(self, edges):
        with pytest.raises(ValueError):
            filter_edges(edges, -1)

    def test_top_edges_sorted_by_magnitude(self, edges):
        top = top_edges(edges, 3)
        weights = [abs(w) for w in top.column("weight_product").to_pylist()]
        assert top.num_rows == 3
        assert weights == sorted(weights, reverse=True)
        assert weights[0] == pytest.approx(0.63)

    def test_top_edges_larger_than_table(self, edges):
        assert top_edges(edges, 100).num_rows == 6

    def test_top_edges_on_empty(self):
        assert top_edges(empty_edges(), 5).num_rows == 0
