"""Command-line simulation of a pool backed by in-memory ledgers.

Seeds a fresh pool and runs a sequence of swaps, printing the reserves
and the constant product after each step.

Usage:
    amm-pool-sim --reserve1 1000 --reserve2 1000 forward:100 backward:50
"""

from __future__ import annotations

import argparse
import sys

import structlog

from amm_pool.config import PoolConfig
from amm_pool.errors import PoolError
from amm_pool.factory import create_in_memory_pool
from amm_pool.log_config import configure_logging
from amm_pool.math.constant_product import constant_product

logger = structlog.get_logger()

ASSET1 = "0x" + "11" * 20
ASSET2 = "0x" + "22" * 20
AUTHORITY = "0x" + "aa" * 20
TRADER = "0x" + "bb" * 20
POOL_ADDRESS = "0x" + "99" * 20


def parse_step(text: str) -> tuple[str, int]:
    """Parse a "direction:amount" swap step."""
    direction, sep, amount = text.partition(":")
    if not sep or direction not in ("forward", "backward"):
        raise argparse.ArgumentTypeError(
            f"Invalid step '{text}' (expected forward:<amount> or backward:<amount>)"
        )
    try:
        value = int(amount)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"Invalid amount in step '{text}'") from err
    if value < 0:
        raise argparse.ArgumentTypeError(f"Negative amount in step '{text}'")
    return direction, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate swaps against a constant-product pool")
    parser.add_argument("--reserve1", type=int, default=1000, help="Initial reserve of asset1")
    parser.add_argument("--reserve2", type=int, default=1000, help="Initial reserve of asset2")
    parser.add_argument(
        "--fee-numerator",
        type=int,
        default=30,
        help="Fee numerator over a denominator of 10000 (default: 30)",
    )
    parser.add_argument(
        "steps",
        nargs="*",
        type=parse_step,
        help="Swap steps as forward:<amount> or backward:<amount>",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the simulation; returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    try:
        config = PoolConfig(fee_numerator=args.fee_numerator)
    except ValueError as err:
        print(f"Error: {err}")
        return 2

    # Traders get enough of both assets to cover any requested step
    funding = sum(amount for _, amount in args.steps)
    pool = create_in_memory_pool(
        ASSET1,
        ASSET2,
        authority=AUTHORITY,
        pool_address=POOL_ADDRESS,
        initial_balance=max(args.reserve1, args.reserve2),
        config=config,
    )
    pool.asset1.mint(TRADER, funding)  # type: ignore[attr-defined]
    pool.asset2.mint(TRADER, funding)  # type: ignore[attr-defined]

    try:
        pool.add_liquidity(AUTHORITY, args.reserve1, args.reserve2)
    except PoolError as err:
        print(f"Error: cannot seed pool: {type(err).__name__}: {err}")
        return 1

    reserve1, reserve2 = pool.reserves()
    print(f"{'step':<20} {'out':>12} {'reserve1':>14} {'reserve2':>14} {'k':>24}")
    print(f"{'seed':<20} {'':>12} {reserve1:>14} {reserve2:>14} {constant_product(reserve1, reserve2):>24}")

    failures = 0
    for direction, amount in args.steps:
        label = f"{direction}:{amount}"
        try:
            if direction == "forward":
                result = pool.swap_forward(TRADER, amount)
            else:
                result = pool.swap_backward(TRADER, amount)
        except PoolError as err:
            failures += 1
            print(f"{label:<20} {type(err).__name__}: {err}")
            continue
        reserve1, reserve2 = pool.reserves()
        k = constant_product(reserve1, reserve2)
        print(f"{label:<20} {result.amount_out:>12} {reserve1:>14} {reserve2:>14} {k:>24}")

    logger.debug("simulation_finished", steps=len(args.steps), failures=failures)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
