#!/usr/bin/env python
"""
SDF Texture CLI - Generate signed distance field textures from image alpha

Usage:
    sdf-texture <input_image> [options]

Examples:
    sdf-texture glyph.png                              # glyph_SDF.png with stored settings
    sdf-texture glyph.png --inside-distance 4          # Tighter inside fall-off
    sdf-texture icon.png --fill-mode source_rgb        # Keep colors, SDF in alpha
    sdf-texture icon.png --alpha-only                  # icon_SDF_Alpha.png
    sdf-texture big.png --method edt                   # Fast exact transform
"""

import argparse
import logging
import sys
from pathlib import Path


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sdf-texture',
        description="Generate signed distance field textures from image alpha masks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Fill Modes (RGB channels; the SDF always goes to alpha):
  solid_white  - Grayscale distance, 0=black 1=white
  solid_black  - Inverted grayscale distance
  sdf          - Grayscale distance (same as solid_white)
  source_rgb   - Original image colors

Distance Methods:
  brute  - Full-image nearest boundary search (exact, slow on large images)
  edt    - Euclidean distance transform (exact, fast)

Options not given on the command line come from the settings file.

Examples:
  %(prog)s glyph.png
  %(prog)s glyph.png --inside-distance 4 --outside-distance 12
  %(prog)s icon.png --alpha-only -o out/icon_mask.png
  %(prog)s glyph.png --inside-distance 6 --save-settings
  %(prog)s --show-settings
        """
    )

    parser.add_argument(
        'input',
        type=str,
        nargs='?',  # Optional for --show-settings
        default=None,
        help='Input image (PNG, TGA, etc.)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output PNG path (default: <input>_SDF.png next to the input)'
    )

    parser.add_argument(
        '--fill-mode',
        type=str,
        default=None,
        choices=['solid_white', 'solid_black', 'sdf', 'source_rgb'],
        help='RGB fill mode (default: stored setting, initially solid_white)'
    )

    parser.add_argument(
        '--inside-distance',
        type=float,
        default=None,
        help='Pixels inside the shape where the SDF reaches 1 (typical 0-32, default: 8)'
    )

    parser.add_argument(
        '--outside-distance',
        type=float,
        default=None,
        help='Pixels outside the shape where the SDF reaches 0 (typical 0-32, default: 8)'
    )

    parser.add_argument(
        '--post-process',
        type=float,
        default=None,
        help='Edge refinement radius in pixels, 0 disables (typical 0-4, default: 0)'
    )

    parser.add_argument(
        '--method',
        type=str,
        default='brute',
        choices=['brute', 'edt'],
        help='Boundary search method (default: brute)'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Worker threads for the brute-force search (default: auto)'
    )

    parser.add_argument(
        '--alpha-only',
        action='store_true',
        help='Keep source RGB and write the SDF to alpha only'
    )

    parser.add_argument(
        '--settings',
        type=str,
        default=None,
        help='Settings file (default: ~/.sdf-texture/settings.yaml)'
    )

    parser.add_argument(
        '--save-settings',
        action='store_true',
        help='Store the effective fill mode and distances for the next run'
    )

    parser.add_argument(
        '--show-settings',
        action='store_true',
        help='Print the stored settings and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Debug logging and tracebacks on errors'
    )

    return parser


def _warn_soft_limits(config) -> None:
    """Mention values outside the usual editor ranges"""
    from sdf_texture.core.config import INSIDE_DISTANCE_RANGE, OUTSIDE_DISTANCE_RANGE, POST_PROCESS_RANGE

    checks = [
        ('inside distance', config.inside_distance, INSIDE_DISTANCE_RANGE),
        ('outside distance', config.outside_distance, OUTSIDE_DISTANCE_RANGE),
        ('post-process distance', config.post_process_distance, POST_PROCESS_RANGE),
    ]
    for label, value, (low, high) in checks:
        if not low <= value <= high:
            print(f"Warning: {label} {value:g} is outside the usual range {low:g}-{high:g}")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    # Import here to keep --help fast
    from sdf_texture import (
        SettingsStore, TextureParser, TextureExporter,
        generate, generate_alpha_mask, InvalidConfiguration,
    )
    from sdf_texture.core import default_output_path

    store = SettingsStore(Path(args.settings) if args.settings else None)

    if args.show_settings:
        print(f"Settings file: {store.path}")
        for key, value in store.as_dict().items():
            print(f"  {key:<24} {value}")
        sys.exit(0)

    if not args.input:
        print("Error: Input file is required")
        print("Usage: sdf-texture <input_image> [options]")
        print("       sdf-texture --show-settings")
        sys.exit(1)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}")
        sys.exit(1)

    try:
        config = store.load().with_overrides(
            fill_mode=args.fill_mode,
            inside_distance=args.inside_distance,
            outside_distance=args.outside_distance,
            post_process_distance=args.post_process,
            method=args.method,
            workers=args.workers,
        )
        config.validate()
        _warn_soft_limits(config)

        texture = TextureParser.parse(input_path)
        mode = "alpha only" if args.alpha_only else config.fill_mode.value
        print(f"Generating SDF: {input_path} ({texture.width}x{texture.height})")
        print(f"Inside: {config.inside_distance:g}px  Outside: {config.outside_distance:g}px  "
              f"Post-process: {config.post_process_distance:g}px  Fill: {mode}  Method: {config.method.value}")

        if args.alpha_only:
            result = generate_alpha_mask(texture, config)
        else:
            result = generate(texture, config)

        output_path = args.output or default_output_path(input_path, alpha_only=args.alpha_only)
        output = TextureExporter.to_png(result, output_path)

        print(f"Output: {output}")

        if args.save_settings:
            saved = store.save(config)
            print(f"Saved settings: {saved}")

        print("Done!")

    except InvalidConfiguration as e:
        print(f"Error: Invalid configuration: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
