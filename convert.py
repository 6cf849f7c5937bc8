#!/usr/bin/env python3
"""
Aura to LWC Markup Converter - Main Entry Point
================================================
Converts Aura component markup (.cmp) into LWC HTML templates.

For every component it writes, under <output-dir>/<lwcName>/:
  - <lwcName>.html             the LWC template
  - <lwcName>.conversion.json  side-channel data for the JS generator
                               (getters, LMS channels, record data, slots)
  - <lwcName>.notes.md         warnings and items that need manual review

Usage:
    python convert.py <Component.cmp> [--output-dir ./output]
    python convert.py <aura-dir> [<aura-dir> ...] --mapping-config overrides.yaml
    python convert.py <Component.cmp> --dry-run --verbose
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from aura_lwc_converter.mappings import load_mappings
from aura_lwc_converter.markup_transformer import transform_aura_markup
from aura_lwc_converter.parser import AuraMarkupParser
from aura_lwc_converter.utils import (
    build_conversion_notes,
    lwc_component_name,
    print_banner,
    print_summary,
)


def main():
    parser = argparse.ArgumentParser(
        description="Convert Aura component markup to LWC templates"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Aura .cmp files or directories containing them",
    )
    parser.add_argument(
        "--output-dir", "-o",
        default="./output",
        help="Directory to write generated LWC files (default: ./output)",
    )
    parser.add_argument(
        "--mapping-config",
        default=None,
        help="Optional YAML file with component/attribute/slot mappings "
             "merged over the built-in tables.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and transform without writing any files.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print_banner()

    # ── Validate inputs ──────────────────────────────────────────────
    for raw in args.paths:
        if not Path(raw).exists():
            print(f"  Input path not found: {raw}")
            sys.exit(1)

    component_files = collect_component_files(args.paths)
    if not component_files:
        print("  No .cmp files found.")
        sys.exit(0)

    mappings = load_mappings(args.mapping_config)
    output_dir = Path(args.output_dir)

    print(f"Found {len(component_files)} component(s)")
    if args.dry_run:
        print("Dry-run mode -- nothing will be written")

    # ── Convert each component ───────────────────────────────────────
    results = []
    for cmp_file in component_files:
        t0 = time.time()
        name = cmp_file.stem
        print(f"\nConverting: {cmp_file}")
        try:
            component = AuraMarkupParser(str(cmp_file)).parse()
            result = transform_aura_markup(component, mappings)
            gen_time = time.time() - t0

            print(f"   Warnings: {len(result.warnings)}")
            print(f"   Getters: {len(result.detected_getters)}")
            print(f"   LMS channels: {len(result.lms_channels)}")
            print(f"   Record data: {len(result.record_data_services)}")

            if not args.dry_run:
                bundle_dir = write_bundle(output_dir, name, result)
                print(f"   Written to: {bundle_dir} ({gen_time:.1f}s)")

            results.append({
                "component": name,
                "status": "Success",
                "time": f"{gen_time:.1f}s",
                "warnings": len(result.warnings),
            })

        except Exception as e:
            gen_time = time.time() - t0
            results.append({
                "component": name,
                "status": f"Failed: {str(e)[:80]}",
                "time": f"{gen_time:.1f}s",
                "warnings": "-",
            })
            print(f"   Failed: {e}")

    # ── Summary ──────────────────────────────────────────────────────
    print_summary(results)


def collect_component_files(paths: list) -> list:
    """Expand files and directories into a sorted, de-duplicated .cmp list."""
    files = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = sorted(path.rglob("*.cmp"))
        elif path.suffix == ".cmp":
            candidates = [path]
        else:
            candidates = []
        for candidate in candidates:
            if candidate not in files:
                files.append(candidate)
    return files


def write_bundle(output_dir: Path, component_name: str, result) -> Path:
    """Write template, conversion JSON and notes for one component."""
    lwc_name = lwc_component_name(component_name)
    bundle_dir = output_dir / lwc_name
    bundle_dir.mkdir(parents=True, exist_ok=True)

    (bundle_dir / f"{lwc_name}.html").write_text(result.template_text, encoding="utf-8")
    (bundle_dir / f"{lwc_name}.conversion.json").write_text(
        json.dumps(result.to_dict(), indent=2), encoding="utf-8"
    )
    (bundle_dir / f"{lwc_name}.notes.md").write_text(
        build_conversion_notes(component_name, result), encoding="utf-8"
    )
    return bundle_dir


if __name__ == "__main__":
    main()
