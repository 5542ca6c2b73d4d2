#!/usr/bin/env python3
"""
CLI for writing an illustrated story.

Usage:
    python cli/generate_story.py "a brave knight finds a cave"
    python cli/generate_story.py "" --image drawing.png
    python cli/generate_story.py "a lost kitten" --continue "the kitten meets an owl" --output kitten.pdf
    python cli/generate_story.py "a dragon who hates fire" --stdout
"""

import argparse
import asyncio
import logging
import re
import sys
from datetime import datetime
from pathlib import Path

from PIL import Image as PILImage, UnidentifiedImageError

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.api.config import EXPORT_TITLE  # noqa: E402
from backend.api.logging import configure_logging  # noqa: E402
from backend.api.services.export import render_html, render_pdf  # noqa: E402
from backend.core.errors import StoryError  # noqa: E402
from backend.core.programs.story_orchestrator import StoryOrchestrator  # noqa: E402
from backend.core.types import Image  # noqa: E402


def load_seed_image(path: str) -> Image:
    """Read an image file, detecting its MIME type with Pillow."""
    data = Path(path).read_bytes()
    try:
        with PILImage.open(Path(path)) as img:
            mime_type = PILImage.MIME.get(img.format, "image/jpeg")
    except UnidentifiedImageError:
        raise SystemExit(f"Not a recognised image: {path}")
    return Image(data=data, mime_type=mime_type)


def output_path_for(prompt: str, output: str = None) -> Path:
    """Resolve the export path; defaults to output/<slug>_<timestamp>.html."""
    output_dir = Path(__file__).parent.parent / "output"
    if output:
        path = Path(output)
        if path.suffix.lower() not in (".html", ".pdf"):
            path = path.with_suffix(".html")
        return path

    slug = re.sub(r"[^a-z0-9]+", "_", (prompt or "story").lower())[:30].strip("_") or "story"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return output_dir / f"{slug}_{timestamp}.html"


def report_error(e: StoryError, verbose: bool) -> None:
    print(f"Error: {e.user_message}", file=sys.stderr)
    if verbose:
        print(f"  ({type(e).__name__}: {e})", file=sys.stderr)


async def write_story(args) -> int:
    def on_progress(stage, detail, completed, total, duration):
        if args.verbose:
            progress = f" ({completed}/{total})" if completed is not None else ""
            print(f"[{stage}] {detail}{progress} [{duration:.1f}s]")

    seed_image = load_seed_image(args.image) if args.image else None

    try:
        orchestrator = StoryOrchestrator(on_progress=on_progress)
        story = await orchestrator.start(args.prompt, seed_image=seed_image)
    except StoryError as e:
        report_error(e, args.verbose)
        return 1

    # A failed continuation keeps the pages written so far
    exit_code = 0
    for instruction in args.continue_with:
        try:
            await orchestrator.continue_story(instruction)
        except StoryError as e:
            report_error(e, args.verbose)
            print(f"Stopped after {story.page_count} pages.", file=sys.stderr)
            exit_code = 1
            break

    pages = story.pages

    if args.stdout:
        print(f"Style: {story.style_anchor}\n")
        for number, page in enumerate(pages, start=1):
            print(f"--- Page {number} ---\n{page.text}\n")
        return exit_code

    path = output_path_for(args.prompt, args.output)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".pdf":
        path.write_bytes(render_pdf(pages, title=args.title))
    else:
        path.write_text(render_html(pages, title=args.title), encoding="utf-8")
    print(f"Story saved to: {path}")

    if args.verbose:
        print("\n--- Story Summary ---")
        print(f"Style anchor: {story.style_anchor}")
        print(f"Pages: {len(pages)}")
    return exit_code


def main():
    parser = argparse.ArgumentParser(
        description="Co-write an illustrated children's story",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python cli/generate_story.py "a brave knight finds a cave"
    python cli/generate_story.py "" --image drawing.png --verbose
    python cli/generate_story.py "a lost kitten" -c "the kitten meets an owl" -c "they fly home"
    python cli/generate_story.py "a dragon who hates fire" --output dragon.pdf
        """,
    )

    parser.add_argument(
        "prompt",
        type=str,
        help="The opening idea (may be empty when --image is given)",
    )

    parser.add_argument(
        "--image", "-i",
        type=str,
        default=None,
        help="Seed image grounding the first page",
    )

    parser.add_argument(
        "--continue", "-c",
        dest="continue_with",
        action="append",
        default=[],
        help="Instruction for an extra page (repeatable)",
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Export file (.html or .pdf). Auto-generated under output/ if not specified.",
    )

    parser.add_argument(
        "--title",
        type=str,
        default=EXPORT_TITLE,
        help=f"Title for the exported document (default: {EXPORT_TITLE})",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the pages to the terminal instead of exporting",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress information",
    )

    args = parser.parse_args()
    configure_logging(json_format=False, level=logging.INFO if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(write_story(args)))


if __name__ == "__main__":
    main()
