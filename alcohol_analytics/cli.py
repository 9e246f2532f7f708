#!/usr/bin/env python3
"""
Alcohol Analytics CLI — dataset summary, view output, exports and the API server.

USAGE:
  python -m alcohol_analytics.cli info                                  # Dataset summary
  python -m alcohol_analytics.cli views                                 # List views
  python -m alcohol_analytics.cli view longrun --param group="Litres of Alcohol"
  python -m alcohol_analytics.cli view beerstrength --param by_decade=true

  python -m alcohol_analytics.cli export percapita --param smoothed=1   # CSV to data/exports
  python -m alcohol_analytics.cli export seasonality --format xlsx --output ./out

  python -m alcohol_analytics.cli serve --port 8000                     # Start API server

  python -m alcohol_analytics.cli --data ./alcohol.csv info             # Other source file
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from fastapi.encoders import jsonable_encoder

from alcohol_analytics.config import DATA_FILE, EXPORTS_FOLDER
from alcohol_analytics.analytics.common import sanitize_for_json
from alcohol_analytics.data.loader import LoadError
from alcohol_analytics.data.store import DataStore
from alcohol_analytics.export.writer import write_csv, write_xlsx
from alcohol_analytics.views.registry import (
    VIEWS, ViewNotFound, activate, deactivate, export_rows,
)


def _parse_params(pairs: list[str] | None) -> dict[str, str]:
    """Turn repeated ``--param key=value`` flags into a dict."""
    params = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected key=value, got {pair!r}")
        params[key.strip()] = value
    return params


def _load(args) -> DataStore:
    store = DataStore(args.data).load()
    store.require_model()
    return store


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def cmd_info(args):
    """Print a dataset summary."""
    _banner("ALCOHOL ANALYTICS — DATASET SUMMARY")
    store = _load(args)
    years = store.years()

    print(f"\n  Source:   {store.source}")
    print(f"  Records:  {store.record_count():,}")
    print(f"  Periods:  {store.date_range()}")
    if years:
        print(f"  Years:    {years[0]}-{years[-1]} ({len(years)})")
    print(f"  Series:   {len(store.series())}")
    print(f"\n  GROUPS ({len(store.groups())}):\n")
    for g in store.groups():
        units = ", ".join(g["units"]) or "-"
        print(f"    {g['label'][:48]:<50}{units}")


def cmd_views(args):
    """List the available views."""
    _banner("ALCOHOL ANALYTICS — VIEWS")
    for view in VIEWS:
        params = ", ".join(f"{k}:{v}" for k, v in view.params.items())
        print(f"\n  {view.id:<14}{view.title}")
        print(f"  {'':<14}{view.summary}")
        print(f"  {'':<14}params: {params}")


def cmd_view(args):
    """Print a view's derived structure as JSON."""
    store = _load(args)
    state = activate(args.view_id, store.model, _parse_params(args.param))
    payload = {
        "view": state.view_id,
        "params": state.params,
        "filename": state.filename,
        "result": sanitize_for_json(state.result),
    }
    deactivate(state)
    print(json.dumps(jsonable_encoder(payload), indent=2))


def cmd_export(args):
    """Write a view's export rows to CSV or Excel."""
    store = _load(args)
    state = activate(args.view_id, store.model, _parse_params(args.param))
    rows = export_rows(state)
    out = Path(args.output) / f"{state.filename}.{args.format}"
    if args.format == "xlsx":
        write_xlsx(rows, out, state.definition.title, state.definition.summary)
    else:
        write_csv(rows, out)
    deactivate(state)
    print(f"  {len(rows):,} rows → {out}")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    from alcohol_analytics.main import create_app

    print(f"\nStarting Alcohol Analytics API on {args.host}:{args.port}...")
    uvicorn.run(create_app(args.data), host=args.host, port=args.port, timeout_keep_alive=65)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Alcohol Analytics — quarterly alcohol availability explorer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data", type=Path, default=DATA_FILE, help=f"Source CSV (default {DATA_FILE})")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    info_parser = subparsers.add_parser("info", help="Dataset summary")
    info_parser.set_defaults(func=cmd_info)

    views_parser = subparsers.add_parser("views", help="List views")
    views_parser.set_defaults(func=cmd_views)

    view_parser = subparsers.add_parser("view", help="Print a view as JSON")
    view_parser.add_argument("view_id", help="View id (see `views`)")
    view_parser.add_argument("--param", action="append", metavar="KEY=VALUE", help="View parameter (repeatable)")
    view_parser.set_defaults(func=cmd_view)

    export_parser = subparsers.add_parser("export", help="Export a view to CSV or Excel")
    export_parser.add_argument("view_id", help="View id (see `views`)")
    export_parser.add_argument("--param", action="append", metavar="KEY=VALUE", help="View parameter (repeatable)")
    export_parser.add_argument("--format", choices=["csv", "xlsx"], default="csv", help="File format (default csv)")
    export_parser.add_argument("--output", default=str(EXPORTS_FOLDER), help=f"Output directory (default {EXPORTS_FOLDER})")
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address (default 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except LoadError as exc:
        print(f"  {exc}", file=sys.stderr)
        return 1
    except (ViewNotFound, ValueError) as exc:
        message = exc.args[0] if exc.args else str(exc)
        print(f"  {message}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
