"""
COVE Command Line Interface (CLI)
=================================

Run the interactive shell:

    cove --data-dir csse_covid_19_data/csse_covid_19_time_series

or serve the HTTP API instead:

    cove --serve --port 8080

The index is built once at startup and never changes afterwards.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import json
import logging
import shlex

from .config import default_sources, load_settings
from .engine import Cove
from .errors import BuildError
from .indices import DuplicatePolicy
from .logs import configure_logging

logger = logging.getLogger(__name__)

HELP = """
Commands:
  help
  stats
  quit

  query <country> [region] [date] [metric]
    - country/region: a name, 'all' (any) or 'total' (country-wide rows)
    - date: MMddyyyy, 'all' or 'total' (latest)
    - metric: confirmed | deaths | recovered (omit for all)
    Example:
      query US all 03122020
      query "Korea, South" total total deaths

  values country [prefix]
  values region "<Country>" [prefix]
  values date "<Country>"
"""


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cove", description="COVID time-series query engine")
    ap.add_argument("--data-dir", help="Directory holding the time-series CSVs (env COVE_DATA_DIR)")
    ap.add_argument("--on-duplicate", choices=[p.value for p in DuplicatePolicy],
                    help="Policy when two sources supply the same value (env COVE_ON_DUPLICATE)")
    ap.add_argument("--serve", action="store_true", help="Serve the HTTP API instead of the shell")
    ap.add_argument("--host", help="Bind address for --serve (env COVE_HOST)")
    ap.add_argument("--port", type=int, help="Port for --serve (env COVE_PORT)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the COVE CLI.

    1) Read settings (environment, then flags)
    2) Build the index
    3) Start the shell or the HTTP server
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings()
    except ValueError as e:
        logger.error("bad configuration: %s", e)
        return 1

    data_dir = args.data_dir or settings.data_dir
    policy = DuplicatePolicy(args.on_duplicate) if args.on_duplicate else settings.on_duplicate
    sources = default_sources(data_dir)

    try:
        engine = Cove.from_sources(sources, policy)
    except BuildError as e:
        logger.error("index build failed: %s", e)
        return 1

    if args.serve:
        import uvicorn
        from .api import create_app
        uvicorn.run(create_app(engine), host=args.host or settings.host, port=args.port or settings.port)
        return 0

    s = engine.stats()
    print(f"Loaded {s['observations']} observations for {s['countries']} countries. Type 'help' for commands.")
    while True:
        try:
            line = input("cove> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line.lower() in ("quit", "exit"):
            break
        try:
            handle(engine, line)
        except ValueError as e:
            print(f"Error: {e}")
    return 0


def handle(engine: Cove, line: str) -> None:
    """Handle one shell command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        s = engine.stats()
        print(f"Countries: {s['countries']} | Regions: {s['regions']} | Observations: {s['observations']}")
        return

    if cmd == "values":
        if len(parts) < 2:
            raise ValueError("usage: values country [prefix] | values region|date <country> [prefix]")
        level = parts[1].lower()
        if level == "country":
            vals = engine.values("country", prefix=parts[2] if len(parts) >= 3 else "")
        else:
            country = parts[2] if len(parts) >= 3 else None
            vals = engine.values(level, country=country, prefix=parts[3] if len(parts) >= 4 else "")
        for v in vals[:50]:
            print(v)
        if len(vals) > 50:
            print(f"... ({len(vals)} total, showing 50)")
        return

    if cmd == "query":
        if len(parts) < 2:
            raise ValueError("usage: query <country> [region] [date] [metric]")
        country = parts[1]
        region = parts[2] if len(parts) >= 3 else "all"
        date = parts[3] if len(parts) >= 4 else "all"
        metric = parts[4] if len(parts) >= 5 else None
        result = engine.query(country, region, date, metric)
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    print("Unknown command. Type 'help'.")


if __name__ == "__main__":
    raise SystemExit(main())
