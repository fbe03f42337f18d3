"""Dependency ordering for phase graphs.

Phases reference their predecessor by phase id. When several nodes share
a phase id (a recurring Iterative Review, for instance), edges resolve to
the first node carrying that id.
"""

import heapq
from typing import Sequence

from .exceptions import InvalidPhaseGraphError


def first_index_by_phase_id(phase_ids: Sequence[str]) -> dict[str, int]:
    """Map each phase id to the position of its first occurrence."""
    index: dict[str, int] = {}
    for position, phase_id in enumerate(phase_ids):
        index.setdefault(phase_id, position)
    return index


def topological_order(nodes: Sequence[tuple[str, str | None]]) -> list[int]:
    """Return node positions so that every predecessor precedes its dependants.

    ``nodes`` is a sequence of ``(phase_id, predecessor)`` pairs. Ties are
    broken by original position, so an already valid order comes back
    unchanged.

    Raises:
        InvalidPhaseGraphError: a predecessor is missing or the edges form a cycle.
    """
    first_index = first_index_by_phase_id([phase_id for phase_id, _ in nodes])
    dependants: dict[int, list[int]] = {}
    ready: list[int] = []

    for position, (phase_id, predecessor) in enumerate(nodes):
        if predecessor is None:
            ready.append(position)
            continue
        parent = first_index.get(predecessor)
        if parent is None:
            raise InvalidPhaseGraphError(
                f"predecessor {predecessor} of phase {phase_id} not found in given phases"
            )
        if parent == position:
            raise InvalidPhaseGraphError(f"phase {phase_id} is its own predecessor")
        dependants.setdefault(parent, []).append(position)

    heapq.heapify(ready)
    order: list[int] = []
    while ready:
        position = heapq.heappop(ready)
        order.append(position)
        for child in dependants.get(position, []):
            heapq.heappush(ready, child)

    if len(order) != len(nodes):
        placed = set(order)
        stuck = sorted({nodes[p][0] for p in range(len(nodes)) if p not in placed})
        raise InvalidPhaseGraphError(f"cycle between phases {', '.join(stuck)}")
    return order
