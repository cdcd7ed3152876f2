"""ConditionGraph: NetworkX view of the linked-field conditions of a form.

Nodes are field ids (archived fields included); an edge ``linked -> field``
means *field* is only visible depending on *linked*. Built per use from the
in-memory aggregate; nothing is cached across forms.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from formkit.domain.errors import InvalidConditionError

if TYPE_CHECKING:
    from formkit.domain.form import Form

type _Graph = nx.DiGraph


class ConditionGraph:
    """Dependency graph of field conditions within one form."""

    def __init__(self, form: Form) -> None:
        self._form_id = form.id
        self._dangling: list[tuple[str, str]] = []
        self._graph: _Graph = self._build(form)

    @property
    def graph(self) -> _Graph:
        return self._graph

    def _build(self, form: Form) -> _Graph:
        """Add every field as a node first so unlinked fields are visible to algorithms."""
        g: _Graph = nx.DiGraph()
        for field in form.fields:
            g.add_node(field.id, name=field.data.name, archived=field.archived)

        for field in form.fields:
            linked_id = field.linked_field_id
            if linked_id is None:
                continue
            if linked_id not in g:
                self._dangling.append((field.id, linked_id))
                continue
            g.add_edge(linked_id, field.id)
        return g

    def dangling(self) -> list[tuple[str, str]]:
        """``(field_id, linked_field_id)`` pairs whose target is not in the form."""
        return list(self._dangling)

    def cycles(self) -> list[list[str]]:
        """Each cycle of linked fields, as a list of field ids."""
        return [list(cycle) for cycle in nx.simple_cycles(self._graph)]

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self._graph)

    def evaluation_order(self) -> list[str]:
        """Field ids ordered so every linked field precedes its dependents.

        Raises:
            InvalidConditionError: If the conditions contain a cycle.
        """
        try:
            return list(nx.topological_sort(self._graph))
        except nx.NetworkXUnfeasible as exc:
            msg = f"Conditions on Form({self._form_id}) contain a cycle"
            raise InvalidConditionError(msg, form_id=self._form_id) from exc

    def depths(self) -> dict[str, int]:
        """Number of condition hops between each field and an unconditioned root."""
        depth: dict[str, int] = {}
        for node in self.evaluation_order():
            depth[node] = max((depth[p] + 1 for p in self._graph.predecessors(node)), default=0)
        return depth

    def dependents(self, field_id: str) -> set[str]:
        """Every field whose visibility hinges, directly or not, on *field_id*."""
        if field_id not in self._graph:
            return set()
        return set(nx.descendants(self._graph, field_id))
