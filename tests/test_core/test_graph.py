"""Unit tests for pinbump.core.graph."""

from __future__ import annotations

import copy
from functools import reduce

import pytest

from pinbump.core.graph import descendants, merge_graphs, render_via_tree
from pinbump.models import DependencyGraph, DependencyNode


@pytest.fixture
def superset_graph() -> DependencyGraph:
    """apache-superset -> flask -> flask-migrate -> alembic, plus flask-login."""
    return {
        "apache-superset": DependencyNode(enables=["flask", "flask-migrate"]),
        "flask": DependencyNode(
            version="2.3.3",
            enables=["flask-migrate", "flask-login"],
            enabled_by=["apache-superset"],
        ),
        "flask-migrate": DependencyNode(
            version="3.1.0",
            enables=["alembic"],
            enabled_by=["apache-superset", "flask"],
        ),
        "flask-login": DependencyNode(version="0.6.3", enabled_by=["flask"]),
        "alembic": DependencyNode(version="1.13.1", enabled_by=["flask-migrate"]),
    }


@pytest.mark.unit
class TestMergeGraphs:
    """Tests for merge_graphs."""

    def test_non_overlapping_keys(self) -> None:
        """Test disjoint graphs are combined."""
        a = {"flask-migrate": DependencyNode(version="2.1.2", enables=["alembic"])}
        b = {"paramiko": DependencyNode(version="3.1.1", enables=["bcrypt"])}

        merged = merge_graphs(a, b)

        assert merged == {
            "flask-migrate": DependencyNode(version="2.1.2", enables=["alembic"]),
            "paramiko": DependencyNode(version="3.1.1", enables=["bcrypt"]),
        }

    def test_overlapping_keys_union_edges(self) -> None:
        """Test edges are unioned, first graph's entries first."""
        a = {"flask-migrate": DependencyNode(enables=["alembic", "async-timeout"])}
        b = {
            "flask-migrate": DependencyNode(enables=["alembic", "flask-sqlalchemy"]),
            "paramiko": DependencyNode(enables=["bcrypt"]),
        }

        merged = merge_graphs(a, b)

        assert merged["flask-migrate"].enables == [
            "alembic",
            "async-timeout",
            "flask-sqlalchemy",
        ]
        assert merged["paramiko"].enables == ["bcrypt"]

    def test_enabled_by_is_unioned(self) -> None:
        """Test the reverse edges follow the same rule."""
        a = {"attrs": DependencyNode(enabled_by=["cattrs"])}
        b = {"attrs": DependencyNode(enabled_by=["jsonschema", "cattrs"])}

        assert merge_graphs(a, b)["attrs"].enabled_by == ["cattrs", "jsonschema"]

    @pytest.mark.parametrize(
        "left, right, expected",
        [
            ("1.0", "2.0", "1.0"),
            (None, "2.0", "2.0"),
            ("", "2.0", "2.0"),
            ("1.0", None, "1.0"),
            (None, None, None),
        ],
    )
    def test_first_non_empty_version_wins(self, left, right, expected) -> None:
        """Test version conflicts silently prefer the first graph."""
        merged = merge_graphs(
            {"six": DependencyNode(version=left)},
            {"six": DependencyNode(version=right)},
        )

        assert merged["six"].version == expected

    def test_key_order(self) -> None:
        """Test keys of the first graph come first."""
        merged = merge_graphs(
            {"b": DependencyNode(), "a": DependencyNode()},
            {"c": DependencyNode(), "a": DependencyNode()},
        )

        assert list(merged) == ["b", "a", "c"]

    def test_empty_graphs(self, superset_graph: DependencyGraph) -> None:
        """Test the empty graph is an identity on both sides."""
        assert merge_graphs({}, superset_graph) == superset_graph
        assert merge_graphs(superset_graph, {}) == superset_graph

    def test_idempotent(self, superset_graph: DependencyGraph) -> None:
        """Test merging a graph with itself changes nothing."""
        assert merge_graphs(superset_graph, superset_graph) == superset_graph

    def test_inputs_not_mutated(self, superset_graph: DependencyGraph) -> None:
        """Test neither input is modified and the result shares no lists."""
        other = {"flask": DependencyNode(enables=["werkzeug"])}
        before_a = copy.deepcopy(superset_graph)
        before_b = copy.deepcopy(other)

        merged = merge_graphs(superset_graph, other)
        merged["alembic"].enabled_by.append("pytest-alembic")

        assert superset_graph == before_a
        assert other == before_b

    def test_fold_over_fragments(self) -> None:
        """Test folding matches merging pairwise."""
        fragments = [
            {"a": DependencyNode(enables=["x"])},
            {"a": DependencyNode(enables=["y"])},
            {"b": DependencyNode(version="1")},
        ]

        folded = reduce(merge_graphs, fragments, {})

        assert folded["a"].enables == ["x", "y"]
        assert folded["b"].version == "1"


@pytest.mark.unit
class TestDescendants:
    """Tests for descendants."""

    def test_start_comes_first(self, superset_graph: DependencyGraph) -> None:
        """Test the closure starts with the package itself."""
        assert descendants(superset_graph, "flask")[0] == "flask"

    def test_transitive_closure(self, superset_graph: DependencyGraph) -> None:
        """Test every transitively enabled package is listed once."""
        result = descendants(superset_graph, "apache-superset")

        assert result == [
            "apache-superset",
            "flask",
            "flask-migrate",
            "alembic",
            "flask-login",
        ]
        assert len(result) == len(set(result))

    def test_leaf(self, superset_graph: DependencyGraph) -> None:
        """Test a leaf only yields itself."""
        assert descendants(superset_graph, "alembic") == ["alembic"]

    def test_missing_start(self, superset_graph: DependencyGraph) -> None:
        """Test an unknown package yields only itself."""
        assert descendants(superset_graph, "numpy") == ["numpy"]

    def test_missing_child(self) -> None:
        """Test edges to packages without a node are followed safely."""
        graph = {"a": DependencyNode(enables=["ghost"])}

        assert descendants(graph, "a") == ["a", "ghost"]

    def test_cycle_terminates(self) -> None:
        """Test accidental cycles do not loop forever."""
        graph = {
            "a": DependencyNode(enables=["b"]),
            "b": DependencyNode(enables=["c"]),
            "c": DependencyNode(enables=["a"]),
        }

        assert descendants(graph, "a") == ["a", "b", "c"]


@pytest.mark.unit
class TestRenderViaTree:
    """Tests for render_via_tree."""

    def test_indents_by_depth(self, superset_graph: DependencyGraph) -> None:
        """Test each level is indented by two spaces."""
        tree = render_via_tree(superset_graph, "alembic")

        assert tree == (
            "alembic\n"
            "  flask-migrate\n"
            "    apache-superset\n"
            "    flask\n"
            "      apache-superset\n"
        )

    def test_direct_dependency(self, superset_graph: DependencyGraph) -> None:
        """Test a package nothing pulled in is a single line."""
        assert render_via_tree(superset_graph, "apache-superset") == "apache-superset\n"

    def test_missing_package(self) -> None:
        """Test unknown packages render as a single line."""
        assert render_via_tree({}, "numpy") == "numpy\n"

    def test_cycle_is_not_expanded_twice(self) -> None:
        """Test a package already on the branch is printed but not expanded."""
        graph = {
            "a": DependencyNode(enabled_by=["b"]),
            "b": DependencyNode(enabled_by=["a"]),
        }

        assert render_via_tree(graph, "a") == "a\n  b\n    a\n"
