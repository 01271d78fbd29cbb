#!/usr/bin/env python3
"""
Play a single round of Color Thief from the command line.

Picks an image (or a random one from a directory), hides one hue and lists
the answer choices. Optionally writes the masked image and an HTML report
showing the masked image, the original and the choices.
"""

import base64
import io
from html import escape
from pathlib import Path

import numpy as np
from PIL import Image

from game_round import Round, RoundState, radius_for, random_image, DIFFICULTIES, DEFAULT_DIFFICULTY
from vivid_hue import load_image


# =============================================================================
# Rendering
# =============================================================================

def pixels_to_png(pixels: np.ndarray) -> bytes:
    """Encode an RGBA buffer as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format='PNG')
    return buffer.getvalue()


def png_data_uri(pixels: np.ndarray) -> str:
    encoded = base64.b64encode(pixels_to_png(pixels)).decode('ascii')
    return f"data:image/png;base64,{encoded}"


def render(game: Round) -> str:
    """Render the round as plain text."""
    lines = [f"Radius: {game.radius:g}°"]
    for i, choice in enumerate(game.choices, 1):
        lines.append(f"  [{i}] {choice.hex}")

    if game.guessed_correctly is not None:
        lines.append("")
        lines.append("Woohoo! You did it!" if game.guessed_correctly else "Nope, that was WRONG.")
    if game.state in (RoundState.SUBMITTED, RoundState.REVEALED):
        lines.append(f"Answer: [{game.correct_index + 1}] {game.target_hex}")
    return '\n'.join(lines)


def render_html(game: Round, image_path: str) -> str:
    """Render the round as a standalone HTML page."""
    safe_path = escape(image_path)

    css = """
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: system-ui, -apple-system, sans-serif;
            background: #f5f5f5;
            color: #333;
            line-height: 1.5;
            padding: 2rem;
            max-width: 900px;
            margin: 0 auto;
        }
        h1 { font-size: 1.5rem; margin-bottom: 0.5rem; }
        h2 { font-size: 1.2rem; margin: 2rem 0 1rem; border-bottom: 1px solid #ddd; padding-bottom: 0.5rem; }
        .meta { color: #666; font-size: 0.9rem; margin-bottom: 1rem; }
        .images { display: grid; grid-template-columns: 1fr 1fr; gap: 1rem; }
        .images img {
            width: 100%;
            object-fit: contain;
            border: 1px solid #ccc;
            border-radius: 8px;
            background: #fff;
        }
        .choices { display: flex; gap: 1rem; flex-wrap: wrap; }
        .choice { text-align: center; font-family: monospace; font-size: 0.8rem; }
        .choice .swatch {
            width: 60px;
            height: 60px;
            border-radius: 6px;
            border: 1px solid #000;
            margin-bottom: 0.25rem;
        }
        .choice.correct .swatch { border: 5px solid #2e7d32; }
        .choice.selected .swatch { border: 3px solid #1976d2; }
        .preview { display: flex; gap: 0.25rem; margin-top: 1rem; }
        .preview .swatch { width: 20px; height: 40px; border-radius: 4px; border: 1px solid #ccc; }
        .result { font-size: 1.2rem; font-weight: 600; margin-top: 1.5rem; }
        .result.win { color: #2e7d32; }
        .result.loss { color: #c62828; }
    """

    finished = game.guessed_correctly is not None
    lines = [
        '<!DOCTYPE html>',
        '<html lang="en">',
        '<head>',
        '<meta charset="utf-8">',
        '<title>Color Thief</title>',
        f'<style>{css}</style>',
        '</head>',
        '<body>',
        '<h1>Color Thief</h1>',
        f'<p class="meta">{safe_path} · radius {game.radius:g}°</p>',
        '<p>One color in the image is missing. Can you spot it?</p>',
    ]

    lines.append('<div class="images">')
    lines.append(f'  <img src="{png_data_uri(game.masked)}" alt="Color removed image">')
    if finished:
        lines.append(f'  <img src="{png_data_uri(game.pixels)}" alt="Original image">')
    lines.append('</div>')

    lines.append('<h2>Choices</h2>')
    lines.append('<div class="choices">')
    for i, choice in enumerate(game.choices):
        classes = ['choice']
        if finished and choice.is_correct:
            classes.append('correct')
        if i == game.selected_index:
            classes.append('selected')
        lines.append(f'  <div class="{" ".join(classes)}">')
        lines.append(f'    <div class="swatch" style="background:{choice.hex}"></div>{i + 1}')
        lines.append('  </div>')
    lines.append('</div>')

    preview = game.selected_preview()
    if preview:
        lines.append('<div class="preview" aria-label="Colors within radius preview">')
        for hex_val in preview:
            lines.append(f'  <div class="swatch" style="background:{hex_val}" title="{hex_val}"></div>')
        lines.append('</div>')

    if finished:
        if game.guessed_correctly:
            lines.append('<p class="result win">Woohoo! You did it!</p>')
        else:
            lines.append('<p class="result loss">Nope, that was WRONG.</p>')

    lines.append('</body>')
    lines.append('</html>')

    return '\n'.join(lines)


# =============================================================================
# Main Pipeline
# =============================================================================

def play_round(image_path: str, radius: float, choice_count: int = 4,
               seed=None, workers: int = 1) -> Round:
    """Load an image and set up a round ready for guessing."""
    game = Round(radius=radius, choice_count=choice_count,
                 rng=np.random.default_rng(seed), workers=workers)
    game.load(load_image(image_path))
    return game


# =============================================================================
# CLI
# =============================================================================

def main():
    import argparse
    import sys

    parser = argparse.ArgumentParser(
        description='Hide one hue of an image and guess which one is missing.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Image file, or a directory to pick a random image from'
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
        '--choices', '-c',
        type=int,
        default=4,
        help='Number of decoy colors (default: 4)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible rounds'
    )
    parser.add_argument(
        '--workers', '-w',
        type=int,
        default=1,
        help='Threads used for masking (default: 1)'
    )
    parser.add_argument(
        '--guess', '-g',
        type=int,
        default=None,
        help='Submit a guess (1-based choice number) and reveal the answer'
    )
    parser.add_argument(
        '--output', '-o',
        nargs='?',
        const=True,
        default=None,
        help='Write masked PNG and HTML report. Optionally specify HTML path, '
             'otherwise auto-names from input.'
    )

    args = parser.parse_args()
    radius = args.radius if args.radius is not None else radius_for(args.difficulty)
    input_path = Path(args.input)

    try:
        if input_path.is_dir():
            image_path = random_image(input_path, np.random.default_rng(args.seed))
        else:
            image_path = input_path
        game = play_round(str(image_path), radius, choice_count=args.choices,
                          seed=args.seed, workers=args.workers)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error setting up round: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Image: {image_path}")

    if args.guess is not None:
        try:
            game.submit(args.guess - 1)
        except IndexError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        game.reveal()

    print(render(game))

    if args.output:
        if args.output is True:
            html_path = image_path.with_name(f"{image_path.stem}-round.html")
        else:
            html_path = Path(args.output)
        png_path = html_path.with_name(f"{image_path.stem}-masked.png")

        try:
            png_path.write_bytes(pixels_to_png(game.masked))
            html_path.write_text(render_html(game, str(image_path)))
            print(f"\nWrote: {png_path}")
            print(f"Wrote: {html_path}")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    main()
