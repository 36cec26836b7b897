"""Directed pool graph built from one reserves snapshot."""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from amm_arbitrage.core.pool import Edge, Pool

logger = logging.getLogger(__name__)

DEFAULT_MAX_POOLS_PER_PAIR = 3


class PoolGraph:
    """Token -> outbound edges adjacency.

    Immutable after construction, so one graph can be shared by any number of
    concurrent scans and quotes. Every edge has strictly positive reserves on
    both sides.
    """

    def __init__(self, adjacency: dict[str, tuple[Edge, ...]], pool_count: int):
        self._adjacency = adjacency
        self._pool_count = pool_count

    @classmethod
    def build(
        cls,
        pools: Iterable[Pool],
        min_liquidity: int = 0,
        max_pools_per_pair: Optional[int] = None,
    ) -> "PoolGraph":
        """Build the graph, silently dropping pools below ``min_liquidity``.

        Args:
            pools: Pool snapshot, in discovery order
            min_liquidity: Minimum reserves required on both sides
            max_pools_per_pair: If set, keep only the deepest N edges per
                directed token pair (by reserves_in, ties by pool id)

        Returns:
            The read-only graph
        """
        adjacency: dict[str, list[Edge]] = defaultdict(list)
        kept = 0
        dropped = 0
        for pool in pools:
            if (
                pool.reserves_x <= 0
                or pool.reserves_y <= 0
                or pool.reserves_x < min_liquidity
                or pool.reserves_y < min_liquidity
            ):
                dropped += 1
                continue
            for edge in pool.edges():
                adjacency[edge.token_in].append(edge)
            kept += 1

        if max_pools_per_pair is not None:
            adjacency = _prune_per_pair(adjacency, max_pools_per_pair)
            kept = len({e.pool_id for edges in adjacency.values() for e in edges})

        frozen = {token: tuple(edges) for token, edges in adjacency.items()}
        logger.debug(
            "Built pool graph: %d pools kept, %d dropped, %d tokens",
            kept, dropped, len(frozen),
        )
        return cls(frozen, kept)

    def edges_from(self, token: str) -> tuple[Edge, ...]:
        return self._adjacency.get(token, ())

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self._adjacency)

    @property
    def pool_count(self) -> int:
        return self._pool_count

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._adjacency.values())

    def __contains__(self, token: object) -> bool:
        return token in self._adjacency

    def __repr__(self) -> str:
        return (
            f"PoolGraph(tokens={len(self._adjacency)}, pools={self._pool_count}, "
            f"edges={self.edge_count})"
        )


def _prune_per_pair(
    adjacency: dict[str, list[Edge]], max_pools_per_pair: int
) -> dict[str, list[Edge]]:
    """Keep the deepest ``max_pools_per_pair`` edges for each (token_in, token_out).

    Surviving edges keep their relative order.
    """
    if max_pools_per_pair < 1:
        return {}

    by_pair: dict[tuple[str, str], list[Edge]] = defaultdict(list)
    for edges in adjacency.values():
        for edge in edges:
            by_pair[(edge.token_in, edge.token_out)].append(edge)

    keep: set[tuple[str, str, str]] = set()
    for pair, edges in by_pair.items():
        ranked = sorted(edges, key=lambda e: (-e.reserves_in, e.pool_id))
        for edge in ranked[:max_pools_per_pair]:
            keep.add((pair[0], pair[1], edge.pool_id))

    pruned: dict[str, list[Edge]] = {}
    for token, edges in adjacency.items():
        survivors = [e for e in edges if (e.token_in, e.token_out, e.pool_id) in keep]
        if survivors:
            pruned[token] = survivors
    return pruned
