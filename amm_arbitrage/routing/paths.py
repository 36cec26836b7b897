"""Bounded simple-path enumeration over a pool graph.

Both point-to-point paths and cycles come from the same explicit-stack walker:
no token is visited twice and no pool is used twice within one path. Reusing a
pool would let a path step straight back through the pool it just left, which
is never a real trade.
"""

from typing import NamedTuple

from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.core.pool import Path


class _Frame(NamedTuple):
    token: str
    path: Path
    visited_tokens: frozenset[str]
    used_pools: frozenset[str]


def _walk(graph: PoolGraph, source: str, target: str, max_hops: int) -> list[Path]:
    if max_hops < 1 or source not in graph:
        return []

    found: list[Path] = []
    stack = [_Frame(source, (), frozenset({source}), frozenset())]
    while stack:
        frame = stack.pop()
        extensions = []
        for edge in graph.edges_from(frame.token):
            if edge.pool_id in frame.used_pools:
                continue
            extended = frame.path + (edge,)
            if edge.token_out == target:
                found.append(extended)
                continue
            if len(extended) < max_hops and edge.token_out not in frame.visited_tokens:
                extensions.append(_Frame(
                    edge.token_out,
                    extended,
                    frame.visited_tokens | {edge.token_out},
                    frame.used_pools | {edge.pool_id},
                ))
        # Reversed so the first outbound edge is explored first.
        stack.extend(reversed(extensions))
    return found


def find_paths(graph: PoolGraph, source: str, target: str, max_hops: int) -> list[Path]:
    """All simple paths from ``source`` to ``target`` with at most ``max_hops`` edges."""
    if source == target:
        return find_cycles(graph, source, max_hops)
    return _walk(graph, source, target, max_hops)


def find_cycles(graph: PoolGraph, base: str, max_hops: int) -> list[Path]:
    """All cycles that start and end at ``base``.

    Every cycle has at least two hops, distinct pool ids, and intermediate
    tokens that are distinct from each other and from ``base``.
    """
    return _walk(graph, base, base, max_hops)
