#!/usr/bin/env python3
"""Merge local PDFs through the same reorder/merge/normalize stages as the API."""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from pdf_merger.config import DEFAULT_PRINT_HEIGHT, DEFAULT_PRINT_WIDTH  # noqa: E402
from pdf_merger.core.exceptions import MergeError, OptimizationError  # noqa: E402
from pdf_merger.core.models import InputFile  # noqa: E402
from pdf_merger.engine.intake import resolve_mime_type, validate_mime_type  # noqa: E402
from pdf_merger.engine.merge import merge_documents  # noqa: E402
from pdf_merger.engine.normalize import normalize_for_print  # noqa: E402
from pdf_merger.engine.ordering import reconcile  # noqa: E402


LINE_WIDTH = 78


def _divider(char: str = "-") -> str:
    return char * LINE_WIDTH


def _print_kv(label: str, value: str) -> None:
    print(f"{label:<16}: {value}")


def _collect_inputs(inputs: List[str]) -> List[InputFile]:
    files: List[InputFile] = []
    for raw in inputs:
        path = Path(raw).expanduser().resolve()
        if not path.is_file():
            raise FileNotFoundError(f"Not a file: {raw}")
        mime_type = resolve_mime_type(path.name, None)
        validate_mime_type(path.name, mime_type)
        files.append(InputFile(
            filename=path.name,
            path=path,
            mime_type=mime_type,
            size_bytes=path.stat().st_size,
        ))
    return files


def main() -> int:
    parser = argparse.ArgumentParser(description="Merge local PDF files into one print-ready PDF.")
    parser.add_argument("inputs", nargs="+", help="PDF files, merged in the given order unless --order is set")
    parser.add_argument("--order", nargs="+", default=None, help="Filenames in the desired merge order")
    parser.add_argument("--output-dir", default="./outputs", help="Directory for the merged file")
    parser.add_argument("--no-normalize", action="store_true", help="Skip print-size normalization")
    parser.add_argument("--page-width", type=float, default=DEFAULT_PRINT_WIDTH, help="Reference page width (pt)")
    parser.add_argument("--page-height", type=float, default=DEFAULT_PRINT_HEIGHT, help="Reference page height (pt)")
    parser.add_argument("--json-out", default=None, help="Write JSON summary to path")
    args = parser.parse_args()

    try:
        files = reconcile(_collect_inputs(args.inputs), args.order)
    except (FileNotFoundError, MergeError) as exc:
        print(f"ERROR: {exc}")
        return 2

    output_dir = Path(args.output_dir).expanduser().resolve()
    print(_divider("="))
    _print_kv("Inputs", f"{len(files)} file(s)")
    _print_kv("Order", ", ".join(f.filename for f in files))
    _print_kv("Output dir", str(output_dir))
    print(_divider())

    start_wall = time.perf_counter()
    try:
        artifact = merge_documents(files, output_dir)
    except MergeError as exc:
        print(f"FAIL: {exc.message}")
        return 1

    sizes = list(artifact.page_sizes)
    optimized = False
    if not args.no_normalize:
        try:
            sizes = normalize_for_print(artifact.path, (args.page_width, args.page_height))
            optimized = True
        except OptimizationError as exc:
            print(f"WARN: {exc.message} Keeping unoptimized output.")

    wall_s = time.perf_counter() - start_wall
    _print_kv("Output", artifact.filename)
    _print_kv("Pages", str(artifact.page_count))
    _print_kv("Normalized", "yes" if optimized else "no")
    _print_kv("Wall", f"{wall_s:.2f}s")

    if args.json_out:
        payload = {
            "output": str(artifact.path),
            "page_count": artifact.page_count,
            "page_sizes": [[round(w, 2), round(h, 2)] for w, h in sizes],
            "optimized": optimized,
            "inputs": [f.filename for f in files],
        }
        out = Path(args.json_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote JSON: {args.json_out}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
