"""Seeded synthetic pool snapshots for demos and tests."""

from typing import Optional

import numpy as np

from amm_arbitrage.core.pool import DEFAULT_FEE_DEN, DEFAULT_FEE_NUM, NATIVE_TOKEN_ID, Pool

NANO = 10**9


class SyntheticMarket:
    """Generates pool snapshots around a random set of fair prices.

    Every token gets one native pool; the remaining pools pair random tokens.
    Each pool's price is the fair cross price times a lognormal factor with
    sigma ``mispricing``, which is what opens arbitrage cycles.
    """

    def __init__(
        self,
        n_tokens: int = 5,
        n_pools: int = 10,
        base_token: str = NATIVE_TOKEN_ID,
        mispricing: float = 0.02,
        mean_depth: float = 10_000.0,
        depth_sigma: float = 0.5,
        fee_num: int = DEFAULT_FEE_NUM,
        fee_den: int = DEFAULT_FEE_DEN,
        seed: Optional[int] = None,
    ):
        """
        Args:
            n_tokens: Number of non-native tokens
            n_pools: Total pools; at least one native pool per token is always built
            base_token: Native asset id
            mispricing: Lognormal sigma of each pool's deviation from fair price
            mean_depth: Typical native-side depth in whole units
            depth_sigma: Lognormal sigma (log-space) of pool depth
            fee_num: Fee numerator for every pool
            fee_den: Fee denominator for every pool
            seed: Random seed for reproducibility
        """
        if n_tokens < 1:
            raise ValueError(f"n_tokens must be >= 1, got {n_tokens}")
        if mispricing < 0:
            raise ValueError(f"mispricing must be >= 0, got {mispricing}")
        self.n_tokens = n_tokens
        self.n_pools = n_pools
        self.base_token = base_token
        self.mispricing = mispricing
        self.mean_depth = mean_depth
        self.depth_sigma = depth_sigma
        self.fee_num = fee_num
        self.fee_den = fee_den
        self._rng = np.random.default_rng(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the random state."""
        if seed is not None:
            self._rng = np.random.default_rng(seed)

    def token_ids(self) -> list[str]:
        return [f"TOKEN{i}" for i in range(self.n_tokens)]

    def generate(self) -> list[Pool]:
        """Draw one snapshot of pools."""
        tokens = self.token_ids()
        # Fair price of each token in native units
        prices = self._rng.lognormal(mean=0.0, sigma=1.0, size=self.n_tokens)

        pools = []
        for i, token in enumerate(tokens):
            native = self._depth()
            token_amount = native / (prices[i] * self._noise())
            pools.append(Pool.native(
                pool_id=f"n2t-{i}",
                native_reserves=int(native * NANO),
                token_id=token,
                token_reserves=int(token_amount * NANO),
                fee_num=self.fee_num,
                fee_den=self.fee_den,
                token_name=token,
                native_id=self.base_token,
            ))

        n_pairs = max(self.n_pools - self.n_tokens, 0) if self.n_tokens > 1 else 0
        for k in range(n_pairs):
            i, j = self._rng.choice(self.n_tokens, size=2, replace=False)
            depth_native = self._depth()
            amount_x = depth_native / prices[i]
            amount_y = depth_native / (prices[j] * self._noise())
            pools.append(Pool.pair(
                pool_id=f"t2t-{k}",
                token_x=tokens[i],
                reserves_x=int(amount_x * NANO),
                token_y=tokens[j],
                reserves_y=int(amount_y * NANO),
                fee_num=self.fee_num,
                fee_den=self.fee_den,
                name_x=tokens[i],
                name_y=tokens[j],
            ))
        return pools

    def _depth(self) -> float:
        return float(self.mean_depth * self._rng.lognormal(0.0, self.depth_sigma))

    def _noise(self) -> float:
        if self.mispricing == 0:
            return 1.0
        return float(self._rng.lognormal(0.0, self.mispricing))
