#!/usr/bin/env python3
"""
Command-line interface for the pool monitor.

Usage:
    python -m poolwatch
    python -m poolwatch --pool 0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc --no-router
    python -m poolwatch --poll-interval 6 --log-level DEBUG
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from eth_utils.address import is_address
from web3 import Web3

from .config import ConfigError, get_config
from .feeds import FeedConfig, Web3PollingFeed
from .monitor import MonitorProcessor, PoolContext
from .tokens import Web3TokenReader

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poolwatch",
        description="Live Uniswap V2 pool and router monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # USDC/WETH pair and the V2 router (defaults)
  python -m poolwatch

  # Pool events only, slower polling
  python -m poolwatch --no-router --poll-interval 12

  # Another pair (seed its tokens with TOKEN0_* / TOKEN1_*)
  TOKEN0_ADDRESS=0x6B175474E89094C44Da98b954EedeAC495271d0F TOKEN0_SYMBOL=DAI TOKEN0_DECIMALS=18 \\
    python -m poolwatch --pool 0xA478c2975Ab1Ea89e8196811F51A7B7Ade33eB11
        """,
    )
    parser.add_argument("--pool", help="Pair contract to monitor (default: POOL_ADDRESS)")
    parser.add_argument("--router", help="Router contract to monitor (default: ROUTER_ADDRESS)")
    parser.add_argument("--no-router", action="store_true", help="Do not decode router transactions")
    parser.add_argument("--no-pool", action="store_true", help="Do not follow pool events")
    parser.add_argument("--poll-interval", type=float, help="Seconds between polls")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL)",
    )
    return parser


def validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.no_router and args.no_pool:
        parser.error("--no-router and --no-pool together leave nothing to monitor")
    for flag in ("pool", "router"):
        value = getattr(args, flag)
        if value and not is_address(value):
            parser.error(f"--{flag} is not a valid address: {value}")
    if args.poll_interval is not None and args.poll_interval <= 0:
        parser.error("--poll-interval must be positive")


async def run(args: argparse.Namespace) -> None:
    config = get_config()
    config.base.setup_logging(args.log_level)

    monitor = config.monitor
    if args.pool:
        monitor.POOL_ADDRESS = args.pool
    if args.router:
        monitor.ROUTER_ADDRESS = args.router
    watch_pool = monitor.WATCH_POOL and not args.no_pool
    watch_router = monitor.WATCH_ROUTER and not args.no_router
    if not (watch_pool or watch_router):
        raise ConfigError("Pool and router monitoring are both disabled")

    chain = config.get_monitor_chain_config("ethereum")
    web3 = Web3(
        Web3.HTTPProvider(
            chain["rpc_url"],
            request_kwargs={"timeout": config.chains.REQUEST_TIMEOUT_SECONDS},
        )
    )

    context = PoolContext.from_config(
        monitor,
        reader=Web3TokenReader(web3),
        watch_router=watch_router,
    )
    processor = MonitorProcessor(
        context,
        maxsize=monitor.QUEUE_MAXSIZE,
        pending_limit=monitor.PENDING_TX_LIMIT,
    )
    feed = Web3PollingFeed(
        web3,
        processor,
        FeedConfig(
            poll_interval=args.poll_interval or config.chains.POLL_INTERVAL_SECONDS,
            max_retries=config.chains.MAX_RETRY_ATTEMPTS,
            retry_delay=config.chains.RETRY_DELAY_SECONDS,
            watch_pool=watch_pool,
            watch_router=watch_router,
        ),
    )

    logger.info(f"🚀 Monitoring {context}")
    logger.info(f"🔌 RPC: {chain['rpc_url'].split('/v2/')[0]}")

    consumer = asyncio.create_task(processor.run())
    try:
        await feed.run()
    finally:
        feed.stop()
        await processor.stop()
        await consumer
        logger.info(f"📊 Pending book: {processor.pending.stats()}")
        logger.info(f"💵 Final state: {context.tracker.snapshot()}")


async def main(argv: Optional[List[str]] = None):
    """Main CLI function."""
    parser = build_parser()
    args = parser.parse_args(argv)
    validate_args(parser, args)

    try:
        await run(args)
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("⏹️  Monitor interrupted by user")
        sys.exit(130)
    except ConfigError as e:
        logger.error(f"❌ Configuration error: {e}")
        sys.exit(2)
    except Exception as e:
        logger.exception(f"💥 Unexpected error: {e}")
        sys.exit(1)


def console_main():
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    console_main()
