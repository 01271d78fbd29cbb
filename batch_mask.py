#!/usr/bin/env python3
"""Batch sample and mask images, writing the color-removed versions."""

import argparse
import sys
import time
from pathlib import Path

import numpy as np
from PIL import Image

from game_round import find_images, radius_for, DIFFICULTIES, DEFAULT_DIFFICULTY
from hue_mask import hue_mask, masked_fraction, MASK_COLOR
from color_space import hue_of_hex
from vivid_hue import load_image, sample_pixels


def mask_image(image_path: Path, output_dir: Path, radius: float,
               rng: np.random.Generator) -> tuple[str, float]:
    """Sample a target for one image and save it with that hue removed.

    Returns:
        Tuple of (target_hex, masked_fraction)
    """
    pixels = load_image(str(image_path))
    target_hex = sample_pixels(pixels, rng=rng)

    mask = hue_mask(pixels, hue_of_hex(target_hex), radius)
    masked = pixels.copy()
    masked[mask] = MASK_COLOR
    coverage = masked_fraction(mask)

    output_file = output_dir / f"{image_path.stem}-masked.png"
    if output_file.exists():
        print(f"  Warning: Overwriting {output_file.name}", file=sys.stderr)
    Image.fromarray(masked).save(output_file)

    return target_hex, coverage


def main():
    parser = argparse.ArgumentParser(
        description='Remove a sampled hue from every image in a directory.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Directory containing images to mask'
    )
    parser.add_argument(
        '--output', '-o',
        required=True,
        help='Directory for masked PNG files'
    )
    difficulty = parser.add_mutually_exclusive_group()
    difficulty.add_argument(
        '--difficulty', '-d',
        choices=list(DIFFICULTIES),
        default=DEFAULT_DIFFICULTY,
        help=f'Named hue radius (default: {DEFAULT_DIFFICULTY})'
    )
    difficulty.add_argument(
        '--radius', '-r',
        type=float,
        help='Hue radius in degrees, overrides --difficulty'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible targets'
    )

    args = parser.parse_args()

    input_dir = Path(args.input)
    output_dir = Path(args.output)
    radius = args.radius if args.radius is not None else radius_for(args.difficulty)

    # Validate input directory
    if not input_dir.is_dir():
        print(f"Error: Input directory not found: {input_dir}", file=sys.stderr)
        sys.exit(2)
    if radius < 0:
        print(f"Error: Radius must be non-negative, got {radius}", file=sys.stderr)
        sys.exit(2)

    output_dir.mkdir(parents=True, exist_ok=True)

    images = find_images(input_dir)
    if not images:
        print(f"No images found in {input_dir}", file=sys.stderr)
        sys.exit(2)

    rng = np.random.default_rng(args.seed)
    total = len(images)
    succeeded = 0
    failed = []

    batch_start = time.perf_counter()

    for i, image_path in enumerate(images, 1):
        try:
            img_start = time.perf_counter()
            target_hex, coverage = mask_image(image_path, output_dir, radius, rng)
            img_elapsed = time.perf_counter() - img_start

            print(f"[{i}/{total}] {image_path.name} → {target_hex}, "
                  f"{coverage:.1%} masked ({img_elapsed:.2f}s)")
            succeeded += 1

        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"
            print(f"[{i}/{total}] {image_path.name} → ERROR: {error_msg}", file=sys.stderr)
            failed.append((image_path.name, error_msg))

    batch_elapsed = time.perf_counter() - batch_start

    # Summary
    print()
    print(f"Completed: {succeeded}/{total} succeeded in {batch_elapsed:.2f}s")
    if succeeded > 0:
        print(f"Average: {batch_elapsed / succeeded:.2f}s per image")
    if failed:
        print(f"Failed ({len(failed)}):")
        for name, error in failed:
            print(f"  - {name}: {error}")
        sys.exit(1)


if __name__ == '__main__':
    main()
