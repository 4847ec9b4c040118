"""
cover.py – cover description and placeholder cover for the finished book.

One generation call for the caption, no retries.  The image is a flat
512×768 colour block; a ready-made cover can be passed with --cover instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from ollama_novelist.generators.prompt_builders import build_cover_prompt
from ollama_novelist.llm.ollama_client import GenerationClient

logger = logging.getLogger(__name__)

COVER_SIZE = (512, 768)
COVER_COLOUR = (100, 100, 200, 255)


def describe_cover(client: GenerationClient, plot: str) -> str:
    logger.info("Creating cover description...")
    return client.generate(build_cover_prompt(plot))


def write_cover_caption(output_dir: Path, caption: str) -> Path:
    path = output_dir / "cover.txt"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(caption.strip() + "\n", "utf-8")
    logger.info("Cover description saved → %s", path)
    return path


def write_placeholder_cover(output_dir: Path) -> Path:
    logger.info("Creating placeholder cover image...")
    path = output_dir / "cover.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", COVER_SIZE, COVER_COLOUR).save(path, format="PNG")
    logger.info("Cover image created at %s", path)
    return path
