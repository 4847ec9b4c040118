"""
storyline.py – plot → ordered chapter plan.

Draft call, then an "improve it, same chapter count" call.  The second reply
is cut out of its ```json fence (if any) and parsed; PlanParseError is left
for the caller, which substitutes a fallback plan.
"""

from __future__ import annotations

import logging

from ollama_novelist.llm.ollama_client import GenerationClient
from ollama_novelist.models import ChapterPlan
from ollama_novelist.utils.validate import extract_json_block, parse_chapter_plan
from . import prompt_builders as pb

logger = logging.getLogger(__name__)


class StorylineGenerator:
    def __init__(self, client: GenerationClient):
        self.client = client

    def draft(self, plot: str, chapter_count: int) -> str:
        """Both generation passes; returns the extracted storyline text."""
        logger.info("Generating storyline with chapters and high-level details...")
        first = self.client.generate(pb.build_storyline_prompt(plot, chapter_count))
        improved = self.client.generate(pb.build_improve_storyline_prompt(first, chapter_count))
        return extract_json_block(improved)

    def generate_storyline(self, plot: str, chapter_count: int) -> ChapterPlan:
        text = self.draft(plot, chapter_count)
        plan = parse_chapter_plan(text)
        logger.info("Storyline parsed: %d chapters (asked for %d)", len(plan), chapter_count)
        return plan
