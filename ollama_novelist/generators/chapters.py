"""
chapters.py – chapter text generation.

    write_first_chapter   draft + rewrite, the draft is thrown away
    write_chapter         one pass with the manuscript so far as context,
                          reissued while the reply is shorter than min_chars
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from ollama_novelist.errors import ChapterGenerationExhausted, ChapterTooShort
from ollama_novelist.llm.ollama_client import GenerationClient
from ollama_novelist.models import ChapterPlanEntry, ChapterRecord
from . import prompt_builders as pb

logger = logging.getLogger(__name__)

MIN_CHAPTER_CHARS = 1000
MAX_ATTEMPTS_PER_CHAPTER = 5


class ChapterWriter:
    def __init__(
        self,
        client: GenerationClient,
        *,
        min_chars: int = MIN_CHAPTER_CHARS,
        max_attempts: int = MAX_ATTEMPTS_PER_CHAPTER,
        backoff: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be ≥1")
        self.client = client
        self.min_chars = min_chars
        self.max_attempts = max_attempts
        self.backoff = backoff
        self._sleep = sleep

    def write_first_chapter(self, storyline: str, entry: ChapterPlanEntry, style: str) -> str:
        logger.info("Writing first chapter...")
        draft = self.client.generate(pb.build_first_chapter_prompt(storyline, entry, style))
        logger.debug("First-chapter draft: %d chars", len(draft))
        return self.client.generate(pb.build_refine_first_chapter_prompt(storyline, draft, style))

    def _checked(self, text: str) -> str:
        if len(text) < self.min_chars:
            raise ChapterTooShort(len(text), self.min_chars)
        return text

    def write_chapter(self, manuscript: str, storyline: str, entry: ChapterPlanEntry, style: str) -> str:
        """
        Generate one later chapter.

        The identical prompt is reissued after every short reply, up to
        ``max_attempts`` calls in total, then ChapterGenerationExhausted.
        """
        logger.info("Writing chapter with title: %s", entry.key)
        prompt = pb.build_chapter_prompt(manuscript, storyline, entry, style)

        last_len = 0
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._checked(self.client.generate(prompt))
            except ChapterTooShort as e:
                last_len = e.length
                logger.warning(
                    "Chapter too short (%d < %d chars), attempt %d/%d",
                    e.length, e.minimum, attempt, self.max_attempts,
                )
            if attempt < self.max_attempts and self.backoff:
                self._sleep(self.backoff)
        raise ChapterGenerationExhausted(entry.key, self.max_attempts, last_len)

    @staticmethod
    def record(entry: ChapterPlanEntry, text: str) -> ChapterRecord:
        return ChapterRecord(key=entry.key, body=text)
