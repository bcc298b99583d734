#!/usr/bin/env python3
"""
merge_files.py
--------------------------------
Merge a folder of PDFs and images (JPG/PNG) into ONE PDF.

Features:
- Stable ordering: case-insensitive by filename, no matter the platform.
- PDFs are copied page by page; each image becomes one A4 page, scaled to
  fit inside a 25pt margin and centred horizontally.
- A file that cannot be read is reported and skipped; the others are still merged.
- Encrypted PDFs are opened with --password when given.

Usage (common cases):
  python merge_files.py
  python merge_files.py ./scans -o merged.pdf
  python merge_files.py ./scans --password "COMMON_PASS"
  python merge_files.py ./scans --margin 0

Install dependencies:
  python -m pip install PyPDF2 Pillow reportlab
"""

import argparse
import sys
from typing import List, Optional

from mergefiles.core import MergeConfig, merge_directory
from mergefiles.errors import DirectoryNotFound, EmptyInput, OutputWriteError
from mergefiles.geometry import usable_area


def main(argv: Optional[List[str]] = None) -> int:
    defaults = MergeConfig()
    parser = argparse.ArgumentParser(description="Merge a folder of PDFs and images into one PDF.")
    parser.add_argument("folder", nargs="?", default=defaults.input_dir, help=f"Folder containing files to merge (default: {defaults.input_dir})")
    parser.add_argument("-o", "--output", default=defaults.output_path, help=f"Output PDF path (default: {defaults.output_path})")
    parser.add_argument("--password", help="Password for encrypted PDFs (optional)")
    parser.add_argument("--margin", type=float, default=defaults.margin, help=f"Margin around images, in points (default: {defaults.margin:g})")

    args = parser.parse_args(argv)

    area_width, area_height = usable_area(defaults.page_size, args.margin)
    if args.margin < 0 or area_width <= 0 or area_height <= 0:
        parser.error(f"--margin {args.margin:g} leaves no room for images on the page")

    config = MergeConfig(
        input_dir=args.folder,
        output_path=args.output,
        password=args.password,
        margin=args.margin,
    )

    print("Starting PDF and image merger...")
    try:
        report = merge_directory(config)
    except DirectoryNotFound as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except EmptyInput as exc:
        print(str(exc))
        return 0
    except OutputWriteError as exc:
        print(f"\n❌ {exc}", file=sys.stderr)
        return 1

    print(f"\n✅ Saved merged PDF to: {report.output_path}")
    for result in report.failed:
        print(f"  Skipped '{result.candidate.name}': {result.error}", file=sys.stderr)
    print(
        f"\nSummary: merged={len(report.succeeded)}, failed={len(report.failed)}, "
        f"pages={report.page_count} (total={len(report.results)})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
