"""Level solvability analysis over the graph of enterable cells.

Nodes are enterable ``(i, j)`` cells; edges join orthogonal neighbours. A
level is solvable from a start cell when the agent can reach some cell next
to a pickup and, from there, some cell next to a dropoff.
"""

from __future__ import annotations

from typing import TypeAlias

import networkx as nx

from gridbot.domain.world import CellKind, GridWorld

CellGraph: TypeAlias = nx.Graph
"""Undirected graph whose nodes are enterable ``(i, j)`` cells."""


def build_cell_graph(world: GridWorld) -> CellGraph:
    """Return the 4-connected graph of cells the agent may enter."""
    graph = nx.Graph()
    for j in range(world.height):
        for i in range(world.width):
            if not world.can_enter(i, j):
                continue
            graph.add_node((i, j))
            for ni, nj in world.neighbors(i, j):
                if world.can_enter(ni, nj):
                    graph.add_edge((i, j), (ni, nj))
    return graph


def shortest_path_length(
    world: GridWorld, start: tuple[int, int], goal: tuple[int, int]
) -> int | None:
    """Number of unit moves from ``start`` to ``goal``, or ``None`` if unreachable."""
    graph = build_cell_graph(world)
    if start not in graph or goal not in graph:
        return None
    try:
        return int(nx.shortest_path_length(graph, start, goal))
    except nx.NetworkXNoPath:
        return None


def _reachable(graph: CellGraph, start: tuple[int, int]) -> set[tuple[int, int]]:
    if start not in graph:
        return set()
    return set(nx.node_connected_component(graph, start))


def level_is_solvable(world: GridWorld, start: tuple[int, int]) -> bool:
    """True if a pickup and then a dropoff position can both be reached from ``start``."""
    graph = build_cell_graph(world)
    reachable = _reachable(graph, start)
    # Every reachable cell lies in the start's component, so reaching a pickup
    # spot never cuts off a dropoff spot that was reachable from the start.
    has_pickup = any(world.is_adjacent(*cell, CellKind.PICKUP) for cell in reachable)
    has_dropoff = any(world.is_adjacent(*cell, CellKind.DROPOFF) for cell in reachable)
    return has_pickup and has_dropoff
