"""Shared configuration for arbitrage scans."""

from dataclasses import dataclass, replace
import multiprocessing
import os

from amm_arbitrage.core.pool import NATIVE_TOKEN_ID

# Network fee charged per hop, in nanoERG (0.0011 ERG).
DEFAULT_PER_HOP_FEE = 1_100_000
MAX_AMOUNT = 2**63 - 1
DEFAULT_MAX_ITERATIONS = 80
DEFAULT_PRECISION = 1_000_000  # 0.001 ERG in nanoERG


@dataclass(frozen=True)
class ScanSettings:
    base_token: str = NATIVE_TOKEN_ID
    max_hops: int = 3
    min_net_profit: int = 0
    per_hop_fee: int = DEFAULT_PER_HOP_FEE
    min_liquidity: int = 0
    min_input: int = 1
    max_input: int = MAX_AMOUNT
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    precision: int = DEFAULT_PRECISION
    n_workers: int = 1

    def __post_init__(self) -> None:
        if not self.base_token:
            raise ValueError("base_token must not be empty")
        if self.max_hops < 2:
            raise ValueError(f"max_hops must be >= 2 for a cycle, got {self.max_hops}")
        if self.per_hop_fee < 0:
            raise ValueError(f"per_hop_fee must be >= 0, got {self.per_hop_fee}")
        if self.min_liquidity < 0:
            raise ValueError(f"min_liquidity must be >= 0, got {self.min_liquidity}")
        if self.min_input < 1:
            raise ValueError(f"min_input must be >= 1, got {self.min_input}")
        if self.max_input < self.min_input:
            raise ValueError(
                f"max_input ({self.max_input}) must be >= min_input ({self.min_input})"
            )
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.precision < 1:
            raise ValueError(f"precision must be >= 1, got {self.precision}")
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")

    def with_overrides(self, **changes) -> "ScanSettings":
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


DEFAULT_SETTINGS = ScanSettings()


def resolve_n_workers() -> int:
    """Resolve worker count from environment or CPU count."""
    return int(os.environ.get("N_WORKERS", str(min(8, multiprocessing.cpu_count()))))
