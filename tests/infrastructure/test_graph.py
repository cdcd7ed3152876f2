"""Tests for ConditionGraph."""

from __future__ import annotations

import pytest

from formkit.domain.conditions import FieldCondition
from formkit.domain.errors import InvalidConditionError
from formkit.domain.form import Form
from formkit.infrastructure.graph import ConditionGraph
from tests.conftest import boolean_field, select_field, text_field


@pytest.fixture
def chain(form: Form) -> Form:
    """a <- b <- c, plus an unconditioned d."""
    a = form.add_field(text_field("a"))
    b = form.add_field(boolean_field("b"))
    c = form.add_field(select_field("c"))
    form.add_field(text_field("d"))
    b.set_linked_field_condition(a, FieldCondition(has_value=True))
    c.set_linked_field_condition(b, FieldCondition.matching(True))
    return form


class TestStructure:
    def test_nodes_and_edges(self, chain: Form) -> None:
        graph = ConditionGraph(chain).graph
        assert set(graph.nodes) == {"a", "b", "c", "d"}
        assert set(graph.edges) == {("a", "b"), ("b", "c")}

    def test_node_attributes(self, chain: Form) -> None:
        chain.remove_field(chain.get_field("d"))
        graph = ConditionGraph(chain).graph
        assert graph.nodes["d"]["archived"] is True
        assert graph.nodes["a"]["name"] == "a"

    def test_dangling(self, form: Form) -> None:
        form.add_field(text_field("x", linked_field_id="ghost", has_value=True))
        graph = ConditionGraph(form)
        assert graph.dangling() == [("x", "ghost")]
        assert "ghost" not in graph.graph


class TestOrdering:
    def test_evaluation_order(self, chain: Form) -> None:
        order = ConditionGraph(chain).evaluation_order()
        assert order.index("a") < order.index("b") < order.index("c")
        assert set(order) == {"a", "b", "c", "d"}

    def test_depths(self, chain: Form) -> None:
        assert ConditionGraph(chain).depths() == {"a": 0, "b": 1, "c": 2, "d": 0}

    def test_dependents(self, chain: Form) -> None:
        graph = ConditionGraph(chain)
        assert graph.dependents("a") == {"b", "c"}
        assert graph.dependents("c") == set()
        assert graph.dependents("missing") == set()


class TestCycles:
    @pytest.fixture
    def cyclic(self, form: Form) -> Form:
        # Records loaded as stored can carry a cycle the form API would refuse.
        form.add_field(text_field("a", linked_field_id="b", has_value=True))
        form.add_field(text_field("b", linked_field_id="a", has_value=True))
        return form

    def test_acyclic(self, chain: Form) -> None:
        graph = ConditionGraph(chain)
        assert graph.is_acyclic()
        assert graph.cycles() == []

    def test_detects_cycle(self, cyclic: Form) -> None:
        graph = ConditionGraph(cyclic)
        assert not graph.is_acyclic()
        assert [sorted(c) for c in graph.cycles()] == [["a", "b"]]

    def test_evaluation_order_raises(self, cyclic: Form) -> None:
        with pytest.raises(InvalidConditionError, match="cycle"):
            ConditionGraph(cyclic).evaluation_order()
