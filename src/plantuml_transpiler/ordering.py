from __future__ import annotations

import heapq
import logging

from grandalf.graphs import Edge, Graph, Vertex

from .types import ClassDiagram, Entity

logger = logging.getLogger(__name__)

# ============================================================================
# Inheritance-aware emission order
#
# Python, Ruby and the JavaScript family evaluate base classes when the
# subclass definition runs, so supertypes have to come first in the output.
# Vertices carry the entity's index in the incoming list; edges run from
# supertype to subtype.
# ============================================================================

_ORDERING_TYPES = ("inheritance", "implementation")


def order_by_inheritance(entities: list[Entity], diagram: ClassDiagram) -> list[Entity]:
    """Return ``entities`` with every supertype ahead of its subtypes.

    Only relationships between members of ``entities`` count. Ties keep the
    incoming order. Entities on an inheritance cycle keep their incoming
    order after everything that could be sorted.
    """
    if len(entities) < 2:
        return list(entities)

    vertices = [Vertex(index) for index in range(len(entities))]
    index_of: dict[str, int] = {}
    for index, entity in enumerate(entities):
        index_of.setdefault(entity.name, index)

    edges: list[Edge] = []
    seen: set[tuple[int, int]] = set()
    for rel in diagram.relationships:
        if rel.type not in _ORDERING_TYPES:
            continue
        child = index_of.get(rel.source)
        parent = index_of.get(rel.target)
        if child is None or parent is None or child == parent:
            continue
        if (parent, child) in seen:
            continue
        seen.add((parent, child))
        edges.append(Edge(vertices[parent], vertices[child]))

    Graph(vertices, edges)

    in_degree = [len(v.e_in()) for v in vertices]
    ready = [index for index, degree in enumerate(in_degree) if degree == 0]
    heapq.heapify(ready)

    order: list[int] = []
    while ready:
        index = heapq.heappop(ready)
        order.append(index)
        for successor in vertices[index].N(+1):
            in_degree[successor.data] -= 1
            if in_degree[successor.data] == 0:
                heapq.heappush(ready, successor.data)

    if len(order) < len(entities):
        placed = set(order)
        cyclic = [index for index in range(len(entities)) if index not in placed]
        logger.warning(
            "Inheritance cycle between %s; keeping declaration order",
            ", ".join(entities[i].name for i in cyclic),
        )
        order.extend(cyclic)

    return [entities[i] for i in order]
