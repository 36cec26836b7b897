"""Command-line interface for scanning and routing over pool snapshots."""

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

from amm_arbitrage.arbitrage.scanner import ArbitrageScanner, ArbSnapshot
from amm_arbitrage.config import DEFAULT_PRECISION, DEFAULT_SETTINGS, resolve_n_workers
from amm_arbitrage.core.graph import PoolGraph
from amm_arbitrage.core.pool import NATIVE_TOKEN_ID
from amm_arbitrage.logging_config import setup_logging
from amm_arbitrage.market.synthetic import SyntheticMarket
from amm_arbitrage.routing.oracle import DEFAULT_MIN_OUTPUT
from amm_arbitrage.routing.quoter import RouteQuote
from amm_arbitrage.routing.router import SmartRouter
from amm_arbitrage.snapshot import SnapshotError, load_pools, to_jsonable


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid decimal value: {value!r}") from None


def _print_route(route: RouteQuote, indent: str = "  ") -> None:
    for hop in route.hops:
        print(
            f"{indent}{hop.display_name:<24} in {hop.input_amount:>20} "
            f"out {hop.output_amount:>20}  impact {hop.price_impact:.3f}%  fee {hop.fee_amount}"
        )


def _print_snapshot(snapshot: ArbSnapshot) -> None:
    if not snapshot.windows:
        print("No profitable cycles found.")
    for rank, arb in enumerate(snapshot.windows, start=1):
        marker = " (tightened)" if arb.tightened else ""
        print(f"\n#{rank} {arb.path_label}{marker}")
        print(
            f"  input {arb.optimal_input}  output {arb.output}  gross {arb.gross_profit}  "
            f"tx fee {arb.tx_fee}  net {arb.net_profit} ({arb.profit_pct:.4f}%)"
        )
        _print_route(arb.route, indent="    ")
    print(
        f"\n{len(snapshot.windows)} windows, total net profit {snapshot.total_net_profit}, "
        f"scanned in {snapshot.scan_time_ms} ms"
    )


def _load_graph(path_arg: str, min_liquidity: int = 0) -> PoolGraph | None:
    snapshot_path = Path(path_arg)
    if not snapshot_path.exists():
        print(f"Error: Snapshot file not found: {snapshot_path}")
        return None
    try:
        pools = load_pools(snapshot_path)
    except SnapshotError as e:
        print(f"Error: {e}")
        return None
    return PoolGraph.build(pools, min_liquidity=min_liquidity)


def scan_command(args: argparse.Namespace) -> int:
    """Scan a pool snapshot for circular arbitrage."""
    try:
        settings = DEFAULT_SETTINGS.with_overrides(
            base_token=args.base,
            max_hops=args.max_hops,
            min_net_profit=args.min_profit,
            per_hop_fee=args.per_hop_fee,
            min_liquidity=args.min_liquidity,
            n_workers=args.workers if args.workers is not None else resolve_n_workers(),
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    graph = _load_graph(args.snapshot, settings.min_liquidity)
    if graph is None:
        return 1

    snapshot = ArbitrageScanner(settings).scan(graph)
    if args.json:
        print(json.dumps(to_jsonable(snapshot), indent=2))
    else:
        print(f"Graph: {graph.pool_count} pools, {len(graph.tokens)} tokens")
        _print_snapshot(snapshot)
    return 0


def route_command(args: argparse.Namespace) -> int:
    """Quote the best routes between two tokens."""
    if args.amount <= 0:
        print(f"Error: Amount must be positive, got {args.amount}")
        return 1
    try:
        router = SmartRouter(
            max_hops=args.max_hops,
            max_routes=args.max_routes,
            slippage_percent=args.slippage,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    graph = _load_graph(args.snapshot)
    if graph is None:
        return 1

    if args.reverse:
        routes = router.find_best_routes_by_output(graph, args.source, args.target, args.amount)
        if args.json:
            print(json.dumps(to_jsonable(routes), indent=2))
            return 0
        if not routes:
            print(f"No route from {args.source} to {args.target} delivers {args.amount}.")
        for rank, route in enumerate(routes, start=1):
            print(f"\n#{rank} {route.path_label}: pay {route.total_input} for {route.total_output}")
            _print_route(route)
        return 0

    response = router.find_routes(graph, args.source, args.target, args.amount)
    if args.json:
        print(json.dumps(to_jsonable(response), indent=2))
        return 0

    if not response.routes:
        print(f"No route from {args.source} to {args.target}.")
    for rank, quote in enumerate(response.routes, start=1):
        route = quote.route
        print(
            f"\n#{rank} {route.path_label}: out {route.total_output} "
            f"(min {quote.min_output} at {quote.slippage_percent}% slippage), "
            f"impact {route.total_price_impact:.3f}%"
        )
        _print_route(route)
    if response.split is not None:
        split = response.split
        print(f"\nSplit: out {split.total_output} (+{split.improvement_pct:.3f}%)")
        for alloc in split.allocations:
            print(f"  {alloc.fraction:.1%} via {alloc.route.path_label}: out {alloc.output_amount}")
    return 0


def oracle_command(args: argparse.Namespace) -> int:
    """List routes buying the target below the oracle rate."""
    if args.rate <= 0:
        print(f"Error: Oracle rate must be positive, got {args.rate}")
        return 1
    try:
        router = SmartRouter(max_hops=args.max_hops)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    graph = _load_graph(args.snapshot)
    if graph is None:
        return 1

    snapshot = router.oracle_arb_snapshot(
        graph, args.target, args.rate,
        source=args.source,
        min_output=args.min_output,
        precision=args.precision,
    )
    if args.json:
        print(json.dumps(to_jsonable(snapshot), indent=2))
        return 0

    if not snapshot.windows:
        print(f"No route from {args.source} to {args.target} beats rate {args.rate}.")
        return 0
    for rank, window in enumerate(snapshot.windows, start=1):
        print(
            f"\n#{rank} {window.path_label}: up to {window.max_input} in for "
            f"{window.output_at_max} out, spot {window.spot_rate:.6f} "
            f"({window.discount_pct:+.2f}% vs oracle)"
        )
        _print_route(window.route)
    print(
        f"\n{len(snapshot.windows)} windows, {snapshot.total_output} {args.target} "
        f"for {snapshot.total_input} {args.source}"
    )
    return 0


def demo_command(args: argparse.Namespace) -> int:
    """Scan a synthetic snapshot."""
    try:
        market = SyntheticMarket(
            n_tokens=args.tokens,
            n_pools=args.pools,
            mispricing=args.mispricing,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    pools = market.generate()
    print(f"Synthetic snapshot: {len(pools)} pools over {args.tokens} tokens (seed {args.seed})")
    snapshot = ArbitrageScanner(DEFAULT_SETTINGS).scan_pools(pools)
    _print_snapshot(snapshot)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="AMM arbitrage scanner - find circular arbitrage and best swap routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  amm-arb scan pools.json
  amm-arb scan pools.json --max-hops 4 --min-profit 1000000 --json
  amm-arb route pools.json --source ERG --target SigUSD --amount 1000000000
  amm-arb oracle pools.json --target SigUSD --rate 0.0000002
  amm-arb demo --tokens 6 --pools 14 --seed 7
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a snapshot for circular arbitrage")
    scan_parser.add_argument("snapshot", help="Path to JSON pool snapshot")
    scan_parser.add_argument("--base", type=str, default=None, help="Base token id (default: ERG)")
    scan_parser.add_argument("--max-hops", type=int, default=None, help="Maximum cycle length (default: 3)")
    scan_parser.add_argument("--min-profit", type=int, default=None, help="Minimum net profit in raw units (default: 0)")
    scan_parser.add_argument(
        "--per-hop-fee", type=int, default=None, help="Transaction fee per hop in raw units (default: 1100000)"
    )
    scan_parser.add_argument(
        "--min-liquidity", type=int, default=None, help="Minimum reserves on both sides of a pool"
    )
    scan_parser.add_argument(
        "--workers", type=int, default=None, help="Worker threads (default: N_WORKERS or CPU count)"
    )
    scan_parser.add_argument("--json", action="store_true", help="Print the snapshot as JSON")
    scan_parser.set_defaults(func=scan_command)

    # Route command
    route_parser = subparsers.add_parser("route", help="Quote the best routes between two tokens")
    route_parser.add_argument("snapshot", help="Path to JSON pool snapshot")
    route_parser.add_argument("--source", required=True, help="Token to sell")
    route_parser.add_argument("--target", required=True, help="Token to buy")
    route_parser.add_argument("--amount", type=int, required=True, help="Input amount (output with --reverse)")
    route_parser.add_argument("--max-hops", type=int, default=3, help="Maximum route length (default: 3)")
    route_parser.add_argument("--max-routes", type=int, default=5, help="Routes to report (default: 5)")
    route_parser.add_argument(
        "--slippage", type=_decimal, default=Decimal("0.5"), help="Slippage tolerance in percent (default: 0.5)"
    )
    route_parser.add_argument(
        "--reverse", action="store_true", help="Treat --amount as the desired output"
    )
    route_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    route_parser.set_defaults(func=route_command)

    # Oracle command
    oracle_parser = subparsers.add_parser("oracle", help="Find routes buying below an oracle rate")
    oracle_parser.add_argument("snapshot", help="Path to JSON pool snapshot")
    oracle_parser.add_argument("--target", required=True, help="Token to buy")
    oracle_parser.add_argument(
        "--rate", type=_decimal, required=True, help="Oracle rate in raw target units per raw source unit"
    )
    oracle_parser.add_argument("--source", default=NATIVE_TOKEN_ID, help="Token to sell (default: ERG)")
    oracle_parser.add_argument("--max-hops", type=int, default=3, help="Maximum route length (default: 3)")
    oracle_parser.add_argument(
        "--min-output", type=int, default=DEFAULT_MIN_OUTPUT, help="Drop windows below this output (default: 10)"
    )
    oracle_parser.add_argument(
        "--precision", type=int, default=DEFAULT_PRECISION, help="Search precision in raw input units (default: 1000000)"
    )
    oracle_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    oracle_parser.set_defaults(func=oracle_command)

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Scan a seeded synthetic snapshot")
    demo_parser.add_argument("--tokens", type=int, default=5, help="Number of tokens (default: 5)")
    demo_parser.add_argument("--pools", type=int, default=10, help="Number of pools (default: 10)")
    demo_parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    demo_parser.add_argument(
        "--mispricing", type=float, default=0.02, help="Lognormal sigma of pool mispricing (default: 0.02)"
    )
    demo_parser.set_defaults(func=demo_command)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
