#!/usr/bin/env python3
"""
Sales Drill-Down CLI — Console summaries, Excel export, and API server.

USAGE:
  python -m sales_drilldown.cli summary                              # Revenue by city
  python -m sales_drilldown.cli summary --city Paris                 # Products in Paris
  python -m sales_drilldown.cli summary --city Paris --product Burger
  python -m sales_drilldown.cli summary --period year --year 2022

  python -m sales_drilldown.cli export                               # Excel drill-down report
  python -m sales_drilldown.cli export --output ./Drilldown.xlsx

  python -m sales_drilldown.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

from sales_drilldown.config import DATASET_PATH, REPORTS_FOLDER
from sales_drilldown.data.errors import DatasetLoadError
from sales_drilldown.data.store import DataStore
from sales_drilldown.data.schemas import PeriodFilter, PeriodType
from sales_drilldown.analytics.dashboard import scene_summary
from sales_drilldown.analytics.navigator import Navigator


def _build_period(args) -> PeriodFilter | None:
    """Build a PeriodFilter from CLI args."""
    pt = getattr(args, "period", None)
    if pt is None:
        return None
    return PeriodFilter(
        period_type=PeriodType(pt),
        year=getattr(args, "year", None),
        month=getattr(args, "month", None),
        quarter=getattr(args, "quarter", None),
    )


def _print_scene(scene: dict) -> None:
    measure = scene["measure"]
    print(f"\n{' → '.join(scene['breadcrumb'])}")
    print(f"{scene['title']} ({scene['period']})\n")
    if scene["empty"]:
        print("  No orders match this selection.")
        return
    for i, g in enumerate(scene["groups"], 1):
        value = f"${g['total']:>12,.2f}" if measure == "revenue" else f"{g['total']:>10,.0f} units"
        print(f"{i:<4}{g['key'][:40]:<42}{value}   {g['share']:>5.1f}%   {g['orders']:,} orders")
    if scene["insight"]:
        print(f"\n  {scene['insight']['title']} — {scene['insight']['label']}")


def cmd_summary(args) -> int:
    """Print the drill-down path given by --city / --product."""
    print("\n" + "=" * 70)
    print("  SALES DRILL-DOWN — SUMMARY")
    print("=" * 70)

    store = DataStore().load(args.data)
    period = _build_period(args)
    nav = Navigator(store)

    _print_scene(scene_summary(nav, period))
    if args.city:
        nav.drill_to_city(args.city)
        _print_scene(scene_summary(nav, period))
    if args.product:
        nav.drill_to_product(args.city, args.product)
        _print_scene(scene_summary(nav, period))
    print()
    return 0


def cmd_export(args) -> int:
    """Write the Excel drill-down report."""
    from sales_drilldown.reports.drilldown_report import generate_excel

    store = DataStore().load(args.data)
    period = _build_period(args)
    if args.output:
        out = Path(args.output)
    else:
        out = REPORTS_FOLDER / f"Drilldown_Report_{datetime.now():%Y%m%d_%H%M%S}.xlsx"

    path = generate_excel(store, out, period)
    print(f"\n  Report saved to: {path}\n")
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    os.environ["SALES_DRILLDOWN_DATASET"] = str(args.data)
    print(f"\nStarting Sales Drill-Down API on port {args.port}...")
    uvicorn.run("sales_drilldown.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)
    return 0


def _add_period_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--period", choices=["month", "quarter", "year"], help="Period type")
    p.add_argument("--year", type=int, help="Year")
    p.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12", help="Month")
    p.add_argument("--quarter", type=int, choices=range(1, 5), metavar="1-4", help="Quarter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sales Drill-Down — restaurant sales by city, product and purchase channel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data", type=Path, default=DATASET_PATH, help=f"Dataset CSV (default {DATASET_PATH})")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    summary_parser = subparsers.add_parser("summary", help="Print the drill-down tables")
    summary_parser.add_argument("--city", help="Drill into this city")
    summary_parser.add_argument("--product", help="Drill into this product (requires --city)")
    _add_period_args(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    export_parser = subparsers.add_parser("export", help="Export the Excel drill-down report")
    export_parser.add_argument("--output", help=f"Output .xlsx (default: {REPORTS_FOLDER}/Drilldown_Report_<timestamp>.xlsx)")
    _add_period_args(export_parser)
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    if getattr(args, "product", None) and not getattr(args, "city", None):
        parser.error("--product requires --city")

    period = _build_period(args)
    if period is not None and period.missing_fields():
        flags = " ".join(f"--{name}" for name in period.missing_fields())
        parser.error(f"--period {args.period} requires {flags}")

    try:
        return args.func(args)
    except DatasetLoadError as exc:
        print(f"\n  Could not load dataset: {exc}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
