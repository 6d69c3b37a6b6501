from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dex_arbitrage.bootstrap import build_app_components
from dex_arbitrage.core.exceptions import ConfigurationError

log = logging.getLogger("dex_arbitrage.system")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Multi-network DEX arbitrage scanner")
    parser.add_argument("--config", help="Path to the YAML configuration file")
    parser.add_argument("--once", action="store_true", help="Run a single scan cycle and exit")
    return parser


async def main(config_path: str | None = None, once: bool = False) -> None:
    log.info("Starting multi-network arbitrage scanner")
    settings, registry, orchestrator, notifier, runner = build_app_components(config_path)
    log.info(
        "Application components initialized: %d networks, %d pairs, interval %.1fs",
        len(orchestrator.pipelines),
        len(registry.pairs),
        settings.scanner.interval_ms / 1000,
    )

    try:
        if once:
            await runner.run_once()
            return

        runner.setup_signal_handlers()
        await runner.start()
        await runner.wait()
        await runner.stop()
    finally:
        await orchestrator.close()
        await notifier.close()


if __name__ == "__main__":
    args = build_parser().parse_args()
    try:
        asyncio.run(main(args.config, once=args.once))
    except ConfigurationError as exc:
        logging.basicConfig()
        log.error("Failed to initialize scanner: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        ...
