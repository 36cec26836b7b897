"""Synthetic market snapshot tests."""

import pytest

from amm_arbitrage.arbitrage.scanner import ArbitrageScanner
from amm_arbitrage.core.pool import PoolKind
from amm_arbitrage.market.synthetic import SyntheticMarket


class TestGeneration:

    def test_pool_counts(self, fixed_seed):
        pools = SyntheticMarket(n_tokens=4, n_pools=10, seed=fixed_seed).generate()
        assert len(pools) == 10
        assert sum(p.kind is PoolKind.N2T for p in pools) == 4
        assert sum(p.kind is PoolKind.T2T for p in pools) == 6

    def test_every_token_has_native_pool(self, fixed_seed):
        market = SyntheticMarket(n_tokens=5, n_pools=5, seed=fixed_seed)
        pools = market.generate()
        assert {p.token_y for p in pools if p.kind is PoolKind.N2T} == set(market.token_ids())

    def test_too_few_pools_still_builds_native_pools(self, fixed_seed):
        pools = SyntheticMarket(n_tokens=3, n_pools=1, seed=fixed_seed).generate()
        assert len(pools) == 3

    def test_single_token_has_no_pairs(self, fixed_seed):
        pools = SyntheticMarket(n_tokens=1, n_pools=5, seed=fixed_seed).generate()
        assert len(pools) == 1

    def test_custom_base_token(self, fixed_seed):
        pools = SyntheticMarket(n_tokens=2, n_pools=3, base_token="BTC", seed=fixed_seed).generate()
        assert all(p.token_x == "BTC" for p in pools if p.kind is PoolKind.N2T)

    def test_reserves_positive(self, fixed_seed):
        for pool in SyntheticMarket(n_tokens=6, n_pools=20, seed=fixed_seed).generate():
            assert pool.reserves_x > 0
            assert pool.reserves_y > 0

    @pytest.mark.parametrize("kwargs", [{"n_tokens": 0}, {"mispricing": -0.1}])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            SyntheticMarket(**kwargs)


class TestMispricing:

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_fair_market_has_no_arbitrage(self, seed):
        pools = SyntheticMarket(n_tokens=5, n_pools=12, mispricing=0.0, seed=seed).generate()
        assert ArbitrageScanner().scan_pools(pools).windows == ()

    def test_mispriced_market_has_arbitrage(self):
        found = 0
        for seed in range(5):
            pools = SyntheticMarket(n_tokens=6, n_pools=16, mispricing=0.05, seed=seed).generate()
            found += len(ArbitrageScanner().scan_pools(pools).windows)
        assert found > 0
