"""Point-to-point router tests: ranking, split routing and depth tiers."""

from decimal import Decimal

import pytest

from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.routing.paths import find_paths
from amm_arbitrage.routing.quoter import quote_route
from amm_arbitrage.routing.router import SmartRouter
from tests.fixtures.pool_fixtures import native_pool, token_pool


@pytest.fixture
def router() -> SmartRouter:
    return SmartRouter()


@pytest.fixture
def diamond_graph() -> PoolGraph:
    """ERG -> A directly through a deep and a shallow pool, plus via B."""
    return PoolGraph.build([
        native_pool("deep", 1_000_000, "A", 2_000_000),
        native_pool("shallow", 10_000, "A", 20_000),
        native_pool("erg-b", 1_000_000, "B", 1_000_000),
        token_pool("b-a", "B", 1_000_000, "A", 2_000_000),
    ])


class TestBestRoutes:

    def test_sorted_by_output(self, router, diamond_graph):
        routes = router.find_best_routes(diamond_graph, "ERG", "A", 5_000)
        outputs = [r.total_output for r in routes]
        assert outputs == sorted(outputs, reverse=True)
        assert routes[0].pool_ids == ("deep",)
        assert len(routes) == 3

    def test_max_routes_truncates(self, diamond_graph):
        routes = SmartRouter(max_routes=1).find_best_routes(diamond_graph, "ERG", "A", 5_000)
        assert len(routes) == 1

    def test_max_hops_excludes_longer_paths(self, diamond_graph):
        routes = SmartRouter(max_hops=1).find_best_routes(diamond_graph, "ERG", "A", 5_000)
        assert {r.pool_ids for r in routes} == {("deep",), ("shallow",)}

    def test_no_route(self, router, diamond_graph):
        assert router.find_best_routes(diamond_graph, "ERG", "Z", 5_000) == []

    def test_by_output_sorted_by_input(self, router, diamond_graph):
        routes = router.find_best_routes_by_output(diamond_graph, "ERG", "A", 5_000)
        inputs = [r.total_input for r in routes]
        assert inputs == sorted(inputs)
        assert all(r.total_output >= 5_000 for r in routes)
        assert routes[0].pool_ids == ("deep",)

    def test_by_output_skips_infeasible_paths(self, router, diamond_graph):
        routes = router.find_best_routes_by_output(diamond_graph, "ERG", "A", 50_000)
        assert ("shallow",) not in {r.pool_ids for r in routes}

    @pytest.mark.parametrize("kwargs", [{"max_hops": 0}, {"max_routes": 0}])
    def test_invalid_router_settings(self, kwargs):
        with pytest.raises(ValueError):
            SmartRouter(**kwargs)


class TestSplit:

    def test_single_path_takes_everything(self, router, parallel_graph):
        path = find_paths(parallel_graph, "ERG", "A", 1)[:1]
        split = router.optimize_split(path, 100_000)
        assert len(split.allocations) == 1
        assert split.allocations[0].fraction == Decimal(1)
        assert split.total_output == quote_route(path[0], 100_000).total_output

    def test_two_identical_pools_split_evenly(self, router, parallel_graph):
        paths = find_paths(parallel_graph, "ERG", "A", 1)
        split = router.optimize_split(paths, 500_000)
        assert len(split.allocations) == 2
        for alloc in split.allocations:
            assert abs(alloc.fraction - Decimal("0.5")) <= Decimal("0.01")
        assert sum(a.input_amount for a in split.allocations) == 500_000
        single = quote_route(paths[0], 500_000).total_output
        assert split.total_output > single

    def test_three_route_split_conserves_input(self, router):
        graph = PoolGraph.build([
            native_pool(f"par-{i}", 1_000_000, "A", 1_000_000) for i in range(3)
        ])
        paths = find_paths(graph, "ERG", "A", 1)
        split = router.optimize_split(paths, 900_000, max_splits=3)
        assert sum(a.input_amount for a in split.allocations) == 900_000
        assert sum(a.fraction for a in split.allocations) == Decimal(1)
        two_way = router.optimize_split(paths, 900_000, max_splits=2)
        assert split.total_output >= two_way.total_output

    def test_detailed_split_reports_improvement(self, router, parallel_graph):
        detail = router.optimize_split_detailed(parallel_graph, "ERG", "A", 500_000)
        assert detail is not None
        assert len(detail.allocations) == 2
        assert detail.improvement_pct >= Decimal("0.5")
        assert detail.total_input == 500_000
        for alloc in detail.allocations:
            assert alloc.route.total_input == alloc.input_amount
            assert alloc.route.total_output == alloc.output_amount

    def test_small_order_not_worth_splitting(self, router, parallel_graph):
        assert router.optimize_split_detailed(parallel_graph, "ERG", "A", 100) is None

    def test_single_path_cannot_split(self, router):
        graph = PoolGraph.build([native_pool("only", 1_000_000, "A", 1_000_000)])
        assert router.optimize_split_detailed(graph, "ERG", "A", 500_000) is None


class TestDepthTiers:

    def test_tier_formula(self, router):
        edge = native_pool("p", 1_000_000, "A", 5).edges()[0]
        tiers = router.depth_tiers(edge)
        assert tiers.pool_id == "p"
        assert (tiers.token_in, tiers.token_out) == ("ERG", "A")
        assert tiers.tiers == (
            (Decimal("0.5"), 5025),
            (Decimal("1"), 10101),
            (Decimal("2"), 20408),
            (Decimal("5"), 52631),
            (Decimal("10"), 111111),
        )

    def test_tiers_increase(self, router, diamond_graph):
        for depth in router.all_depth_tiers(diamond_graph, "ERG"):
            amounts = [amount for _, amount in depth.tiers]
            assert amounts == sorted(amounts)

    def test_all_depth_tiers_per_outbound_edge(self, router, diamond_graph):
        depths = router.all_depth_tiers(diamond_graph, "ERG")
        assert [d.pool_id for d in depths] == ["deep", "shallow", "erg-b"]
        assert router.all_depth_tiers(diamond_graph, "Z") == []


class TestFindRoutes:

    def test_response_bundle(self, router, diamond_graph):
        response = router.find_routes(diamond_graph, "ERG", "A", 5_000)
        assert len(response.routes) == 3
        best = response.routes[0]
        assert best.min_output == best.route.total_output * 995 // 1000
        assert len(response.depth_tiers) == 3

    def test_build_graph_prunes_per_pair(self):
        router = SmartRouter(max_pools_per_pair=1)
        graph = router.build_graph([
            native_pool("small", 100, "A", 100),
            native_pool("large", 1000, "A", 1000),
        ])
        assert graph.pool_count == 1
