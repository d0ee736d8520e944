from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .api_models import PodReportRequest
from .comparison import compare
from .config import load_config
from .errors import ReportError
from .report.pdf_builder import assemble


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate a proof-of-delivery PDF from a JSON report request"
    )
    parser.add_argument(
        "input", type=Path, help="Request JSON with collection, delivery and job"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output PDF path (default: <input_stem>_pod.pdf)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    parser.add_argument(
        "--comparison-json",
        type=Path,
        default=None,
        help="Optional path to write the computed comparison JSON",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    args = parse_args(argv)
    if not args.input.exists():
        print(f"Error: input file not found: {args.input}", file=sys.stderr)
        return 1
    try:
        request = PodReportRequest.model_validate_json(args.input.read_text(encoding="utf-8"))
    except ValidationError as exc:
        print(f"Error: invalid report request:\n{exc}", file=sys.stderr)
        return 1
    try:
        config = load_config(args.config)
    except (ValueError, OSError) as exc:
        print(f"Error: invalid config: {exc}", file=sys.stderr)
        return 1

    collection = request.collection.to_domain()
    delivery = request.delivery.to_domain()
    job = request.job.to_domain()
    out_pdf = args.output or args.input.with_name(f"{args.input.stem}_pod.pdf")
    try:
        pdf = assemble(collection, delivery, job, config=config)
    except ReportError as exc:
        print(f"Error: PDF generation failed: {exc}", file=sys.stderr)
        return 1
    out_pdf.parent.mkdir(parents=True, exist_ok=True)
    out_pdf.write_bytes(pdf)
    print(f"wrote report: {out_pdf}")

    if args.comparison_json is not None:
        args.comparison_json.parent.mkdir(parents=True, exist_ok=True)
        args.comparison_json.write_text(
            json.dumps(compare(collection, delivery).to_dict(), indent=2), encoding="utf-8"
        )
        print(f"wrote comparison: {args.comparison_json}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
