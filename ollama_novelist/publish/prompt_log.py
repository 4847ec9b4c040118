"""
prompt_log.py – save the finished manuscript under a name derived from the prompt.

    <output>/prompts/<prompt with only [A-Za-z0-9._ ] kept>.txt
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ollama_novelist.utils.formatter import format_text

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[^a-z0-9._ ]", re.I)


def safe_filename(text: str, default: str = "untitled") -> str:
    name = _UNSAFE_RE.sub("", text).strip()
    return name or default


def write_prompt_log(output_dir: Path, prompt: str, manuscript: str) -> Path:
    path = output_dir / "prompts" / f"{safe_filename(prompt)}.txt"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_text(manuscript), "utf-8")
    logger.info('Output for prompt "%s" has been written to %s', prompt, path)
    return path
