#!/usr/bin/env python3
"""
svgsmith CLI

Turns an image into a clean SVG: Detect format → Remove BG → Vectorize → Post-process → Export
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from svgsmith import SvgsmithError, process_image
from svgsmith.config import OUTPUTS_DIR
from svgsmith.models import VectorDocument
from svgsmith.modes import MODE_CONFIG
from svgsmith.processors.component import generate_react_component
from svgsmith.processors.exporter import wrap_with_background
from svgsmith.processors.postprocess import replace_colors

CONTENT_TYPES = {".svg": "image/svg+xml", ".png": "image/png", ".jpg": "image/jpeg", ".jpeg": "image/jpeg"}


def convert(
    input_path: str,
    output_dir: str | None = None,
    mode: str = "icon",
    remove_background: bool = False,
    name: str | None = None,
    optimize: bool = True,
    preview: str | None = None,
    replacements: dict[str, str] | None = None,
) -> dict:
    """
    Convert an image file and write the results.

    Args:
        input_path: Path to the input image (PNG, JPEG or SVG)
        output_dir: Directory to save outputs (default: data/outputs)
        mode: "icon" or "logo"
        remove_background: Remove the detected background first
        name: Component name override
        optimize: Run scour on the result
        preview: Also write the SVG on a "black" or "white" square
        replacements: Old color to new color mapping applied to the result

    Returns:
        Dictionary of output file paths
    """
    output_dir = Path(output_dir) if output_dir else OUTPUTS_DIR
    output_dir.mkdir(parents=True, exist_ok=True)

    path = Path(input_path)
    result = process_image(
        path.read_bytes(),
        path.name,
        mode=mode,
        remove_background=remove_background,
        component_name=name,
        content_type=CONTENT_TYPES.get(path.suffix.lower()),
        optimize=optimize,
    )

    if replacements:
        doc = VectorDocument.from_string(result.svg)
        changed = replace_colors(doc, replacements)
        result.svg = doc.to_string()
        result.component = generate_react_component(result.svg, result.component_name, result.mode)
        print(f"Replaced {changed} color attributes")

    outputs = {}

    svg_path = output_dir / f"{result.component_name}.svg"
    svg_path.write_text(result.svg)
    print(f"Wrote {svg_path}")
    outputs["svg"] = str(svg_path)

    tsx_path = output_dir / f"{result.component_name}.tsx"
    tsx_path.write_text(result.component)
    print(f"Wrote {tsx_path}")
    outputs["component"] = str(tsx_path)

    metadata = result.to_dict()
    metadata.pop("svg")
    metadata.pop("component")
    json_path = output_dir / f"{result.component_name}.json"
    json_path.write_text(json.dumps(metadata, indent=2))
    print(f"Wrote {json_path}")
    outputs["metadata"] = str(json_path)

    if preview:
        preview_path = output_dir / f"{result.component_name}.{preview}.svg"
        preview_path.write_text(wrap_with_background(result.svg, background=preview))
        print(f"Wrote {preview_path}")
        outputs["preview"] = str(preview_path)

    print(f"Colors: {', '.join(result.detected_colors) or '-'}  ({result.processing_time_ms}ms)")
    return outputs


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Convert an image into an optimized SVG and React component",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input", help="Path to the input image (PNG, JPEG or SVG)")
    parser.add_argument(
        "-o", "--output-dir",
        default=None,
        help="Directory to save output files (default: data/outputs)",
    )
    parser.add_argument(
        "--mode",
        choices=sorted(MODE_CONFIG),
        default="icon",
        help="icon: single color, themeable; logo: original colors",
    )
    parser.add_argument(
        "--remove-background",
        action="store_true",
        help="Remove the background color before tracing",
    )
    parser.add_argument("--name", default=None, help="Component name (default: derived from the filename)")
    parser.add_argument("--no-optimize", action="store_true", help="Skip scour optimization")
    parser.add_argument(
        "--preview",
        choices=["black", "white"],
        default=None,
        help="Also write a preview of the SVG on a solid background",
    )
    parser.add_argument(
        "--replace-color",
        action="append",
        default=[],
        metavar="OLD=NEW",
        help="Swap a color in the result, e.g. --replace-color \"#FF0000=#0044FF\" (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not Path(args.input).exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    replacements = {}
    for pair in args.replace_color:
        old, sep, new = pair.partition("=")
        if not sep or not old or not new:
            parser.error(f"--replace-color expects OLD=NEW, got {pair!r}")
        replacements[old] = new

    print(f"Processing: {args.input}")
    try:
        outputs = convert(
            args.input,
            output_dir=args.output_dir,
            mode=args.mode,
            remove_background=args.remove_background,
            name=args.name,
            optimize=not args.no_optimize,
            preview=args.preview,
            replacements=replacements,
        )
    except SvgsmithError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"\nDone! Generated {len(outputs)} files.")


if __name__ == "__main__":
    main()
