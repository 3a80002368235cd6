#!/usr/bin/env python3
"""Prime portrait: turn an image into a prime number that still looks like it.

The image is scaled to the requested grid, each pixel becomes one decimal
digit, and the resulting number is nudged digit by digit until it is a
(probable) prime.  Both the starting grid and the prime grid are printed;
``--html`` additionally writes a page with the changed digits highlighted.
"""

import argparse
import sys

from big_integer import sci_approx
from digit_sequence import PIXEL_MODULI, DigitSequence, DigitSequenceError
from grid_render import render_html, render_text
from image_digits import ImageLoadError, load_grayscale
from parallel_search import find_nearby_prime_parallel
from primality import DEFAULT_ROUNDS
from prime_search import SearchExhausted, next_prime_digits

EXIT_ERROR = 1
EXIT_EXHAUSTED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find a prime number whose digits draw the given image"
    )
    parser.add_argument("file", help="The image file")
    parser.add_argument("--width", type=int, default=30,
                        help="Width of the digit grid (digits per row)")
    parser.add_argument("--height", type=int, default=60,
                        help="Height of the digit grid (rows)")
    parser.add_argument("--modulus", type=int, choices=PIXEL_MODULI, default=10,
                        help="Pixel intensity modulus used to pick each digit")
    parser.add_argument("--levels", type=int,
                        help="Dither the image down to this many gray levels first")
    parser.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS,
                        help="Miller-Rabin rounds per primality test")
    parser.add_argument("--positions", type=int, default=1,
                        help="Digits perturbed per trial")
    parser.add_argument("--perturb-leading", action="store_true",
                        help="Allow the leading digit to change as well")
    parser.add_argument("--strategy", choices=("random", "next"), default="random",
                        help="'random' perturbs digits, 'next' takes the next prime up")
    parser.add_argument("--max-iterations", type=int,
                        help="Give up after this many primality tests")
    parser.add_argument("--time-limit", type=float,
                        help="Give up after this many seconds")
    parser.add_argument("--workers", type=int, default=1,
                        help="Worker processes for the random search (0 = auto)")
    parser.add_argument("--seed", type=int, help="Seed for the random search")
    parser.add_argument("--html", metavar="PATH",
                        help="Also write an HTML page of the prime grid")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the grids")
    return parser


def fail(message: str, code: int = EXIT_ERROR) -> None:
    print("Error:", message, file=sys.stderr)
    sys.exit(code)


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    def info(message: str) -> None:
        if not args.quiet:
            print(message, file=sys.stderr)

    try:
        pixels = load_grayscale(args.file, args.width, args.height, args.levels)
        digits = DigitSequence.from_pixels(pixels, args.modulus)
    except (ImageLoadError, ValueError) as e:
        fail(str(e))

    height, width = pixels.shape
    info(f"I have converted the image into a {len(digits)}-digit number "
         f"({width}x{height})")
    print(render_text(digits, width, height))

    try:
        if args.strategy == "next":
            info("I am now calculating the next prime up")
            result = next_prime_digits(digits, rounds=args.rounds)
        else:
            info("I am now calculating the prime number version, "
                 "this may take a long time")
            result = find_nearby_prime_parallel(
                digits,
                rounds=args.rounds,
                positions=args.positions,
                preserve_leading=not args.perturb_leading,
                max_iterations=args.max_iterations,
                time_limit=args.time_limit,
                workers=args.workers or None,
                seed=args.seed,
                progress=not args.quiet,
            )
    except SearchExhausted as e:
        fail(str(e), EXIT_EXHAUSTED)
    except (DigitSequenceError, ValueError) as e:
        fail(str(e))

    print(render_text(result.digits, width, height))

    info("--- Successfully Found Prime ---")
    info(f"Digits: {len(result.digits)}")
    info(f"Changed positions: {len(result.changed)} {result.changed[:20]}")
    info(f"Primality tests: {result.iterations} ({result.elapsed:.2f}s)")
    info(f"Prime Candidate ~ {sci_approx(result.value)}")

    if args.html:
        page = render_html(result.digits, width, height,
                           title=f"Prime portrait of {args.file}",
                           highlight=result.changed)
        try:
            with open(args.html, "w", encoding="utf-8") as f:
                f.write(page)
        except OSError as e:
            fail(f"Unable to write '{args.html}': {e}")
        info(f"HTML written to {args.html}")


if __name__ == "__main__":
    main()
