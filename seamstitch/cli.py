"""
Command line entry point.

    python -m seamstitch [image1] [image2] [margin] [output] [mode]

mode: 0 = direct stitch, 1 = gradient visualization of image1,
      2 = gradient-domain stitch
"""

import argparse
import sys
from typing import List, Optional

from .codec import decode, encode
from .config import StitchConfig, StitchMode
from .errors import DecodeError, EncodeError, StitchError
from .pipeline import execute, load_fields


def build_parser() -> argparse.ArgumentParser:
    defaults = StitchConfig()
    parser = argparse.ArgumentParser(
        prog='seamstitch',
        description='Stitch two overlapping images along a minimum-cut seam.')
    parser.add_argument('image1', nargs='?', default=defaults.image1,
                        help=f'left image (default: {defaults.image1})')
    parser.add_argument('image2', nargs='?', default=defaults.image2,
                        help=f'right image (default: {defaults.image2})')
    parser.add_argument('margin', nargs='?', type=int, default=defaults.margin,
                        help=f'overlap width in pixels (default: {defaults.margin})')
    parser.add_argument('output', nargs='?', default=defaults.output,
                        help=f'output image (default: {defaults.output})')
    parser.add_argument('mode', nargs='?', type=StitchMode.parse, default=defaults.mode,
                        help='0 = direct stitch, 1 = gradient view, 2 = gradient stitch '
                             f'(default: {defaults.mode.value})')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    mode = args.mode
    paths = [args.image1, args.image2][:mode.n_inputs]

    print("Opening images...")
    try:
        fields = load_fields(mode, [decode(path) for path in paths])
    except DecodeError as exc:
        print("Failed to open image files!")
        print(f"  {exc}")
        return 1

    print("Stitching images...")
    try:
        buffer, width, height = execute(mode, fields, args.margin)
    except StitchError as exc:
        print(f"Stitching failed: {exc}")
        return 1
    print("Stitching complete!")

    print("Saving result...")
    try:
        encode(args.output, buffer, width, height)
    except EncodeError as exc:
        print("Failed to save result!")
        print(f"  {exc}")
        return 1

    print("Success!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
