"""
Download today's prices for the configured instruments.

Usage:
    uv run python scripts/run_download.py                       # all enabled instruments
    uv run python scripts/run_download.py VOD BARC              # just these symbols
    uv run python scripts/run_download.py --data-dir data/      # tables in data/
    uv run python scripts/run_download.py --config pricefetch.yaml
    uv run python scripts/run_download.py --print               # show reference tables only

If --config is given (or pricefetch.yaml exists in the working directory)
the run is driven by that file; otherwise a default config is built for
--data-dir. Prices land in outputs/price.csv and failures in
outputs/errors.txt.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_download")

DEFAULT_CONFIG = Path("pricefetch.yaml")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Download stock prices from market-data pages.")
    p.add_argument("symbols", nargs="*", help="Only download these symbols")
    p.add_argument("--config", type=Path, default=None, help="Path to pricefetch.yaml")
    p.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding source.csv and stock.csv (default: current directory)",
    )
    p.add_argument("--output-dir", type=Path, default=None, help="Where to write outputs")
    p.add_argument(
        "-p", "--print",
        dest="print_only",
        action="store_true",
        help="Do not download anything, just print reference information",
    )
    return p.parse_args(argv)


def _build_config(args: argparse.Namespace):
    from stock_price_ingest.config import generate_default_config, load_config

    config_path = args.config
    if config_path is None and DEFAULT_CONFIG.exists():
        config_path = DEFAULT_CONFIG

    if config_path is not None:
        config = load_config(config_path)
    else:
        config = generate_default_config()

    if args.data_dir is not None:
        config.data.data_dir = str(args.data_dir)
    if args.output_dir is not None:
        config.output.output_dir = str(args.output_dir)
    return config


def _print_reference(config) -> None:
    from stock_price_ingest.reference import describe_reference, load_instruments, load_sources

    sources = load_sources(config.sources_path)
    instruments = load_instruments(config.instruments_path)
    for source in sources:
        log.info("Source %d  %-20s %s", source.id, source.name, source.url)
    log.info("\n%s", describe_reference(sources, instruments).to_string(index=False))


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    import stock_price_ingest
    from stock_price_ingest.exceptions import ConfigurationError

    args = _parse_args(argv)
    config = _build_config(args)

    data_dir = Path(config.data.data_dir)
    if not data_dir.is_dir():
        log.error("The data directory %s is not a directory.", data_dir)
        return 1

    try:
        if args.print_only:
            _print_reference(config)
            return 0

        log.info("Reading reference data from %s", data_dir.resolve())
        result = stock_price_ingest.run_config(config, symbols=args.symbols or None)
    except (ConfigurationError, FileNotFoundError) as exc:
        log.error("%s", exc)
        return 1

    if result.failures:
        log.info("Got the following errors:")
        for failure in result.failures:
            log.info("ERROR %s", failure)

    log.info(
        "Done: %d price(s) for %s, %d failure(s). Outputs in %s",
        result.succeeded,
        result.observation_date,
        result.failed,
        config.output.output_dir,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
