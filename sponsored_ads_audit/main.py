"""Sponsored ads bulk report audit entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from ads_audit import config
from ads_audit.application.analysis_service import analyze
from ads_audit.application.reporting.rendering import render_summary
from ads_audit.errors import AnalysisError, AnalysisNotFoundError
from ads_audit.infrastructure.analysis_store import JsonAnalysisStore
from ads_audit.infrastructure.excel_repository import load_bulk_rows
from ads_audit.infrastructure.report_exporter import save_analysis_workbook, save_summary_json

logger = logging.getLogger("ads_audit")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Audit an advertising bulk export for wasted and inefficient spend.")
    parser.add_argument("--store-dir", type=Path, default=config.STORE_DIR, help="Saved analysis directory.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a bulk export workbook.")
    analyze_parser.add_argument("input", type=Path)
    analyze_parser.add_argument("--sheet", default=None, help="Sheet to read; detected when omitted.")
    analyze_parser.add_argument("--target-acos", type=float, default=config.DEFAULT_TARGET_ACOS)
    analyze_parser.add_argument("--json", dest="json_path", type=Path, default=None)
    analyze_parser.add_argument("--excel", dest="excel_path", type=Path, default=None)
    analyze_parser.add_argument("--owner", default=None, help="Owner id to save the analysis under.")
    analyze_parser.add_argument("--name", default=None, help="Saved analysis name; defaults to the file stem.")

    list_parser = subparsers.add_parser("list", help="List saved analyses.")
    list_parser.add_argument("--owner", required=True)

    delete_parser = subparsers.add_parser("delete", help="Delete a saved analysis.")
    delete_parser.add_argument("--owner", required=True)
    delete_parser.add_argument("analysis_id")
    return parser


def _run_analyze(args: argparse.Namespace) -> int:
    sheet_name, rows = load_bulk_rows(args.input, sheet=args.sheet)
    result = analyze(rows, args.target_acos)
    print(f"Sheet: {sheet_name} ({len(rows)} rows, {len(result.raw_data)} after deduplication)")
    print(render_summary(result))

    if args.json_path is not None:
        save_summary_json(args.json_path, result)
        print(f"Saved JSON: {args.json_path}")
    if args.excel_path is not None:
        saved, error_message = save_analysis_workbook(args.excel_path, result)
        if saved:
            print(f"Saved Excel: {args.excel_path}")
        else:
            print(f"Excel save skipped (file may be open/locked): {error_message}")
    if args.owner:
        store = JsonAnalysisStore(args.store_dir)
        analysis_id = store.save(
            args.owner,
            args.name or args.input.stem,
            rows,
            result,
            args.target_acos,
        )
        print(f"Saved analysis: {analysis_id}")
    return 0


def _run_list(args: argparse.Namespace) -> int:
    records = JsonAnalysisStore(args.store_dir).list(args.owner)
    summary: List[dict] = [
        {
            "id": record.id,
            "name": record.name,
            "date": record.date,
            "target_acos": record.target_acos,
            "total_spend": record.analysis.get("metrics", {}).get("totalSpend"),
        }
        for record in records
    ]
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


def _run_delete(args: argparse.Namespace) -> int:
    JsonAnalysisStore(args.store_dir).delete(args.owner, args.analysis_id)
    print(f"Deleted analysis: {args.analysis_id}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = _build_parser().parse_args(argv)
    handlers = {"analyze": _run_analyze, "list": _run_list, "delete": _run_delete}
    try:
        return handlers[args.command](args)
    except AnalysisError as exc:
        logger.error("analysis failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except AnalysisNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
