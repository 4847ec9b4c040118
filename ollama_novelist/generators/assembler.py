"""
assembler.py – drives plot → title → storyline → chapters for one novel.

States run strictly in order:

    PLOTTING_PLOT → REFINING_PLOT → TITLING → STORYLINING
      → WRITING_FIRST_CHAPTER → WRITING_CHAPTER (2..N) → COMPLETE

A storyline that cannot be parsed is replaced by the placeholder plan and the
run continues.  Client errors and an exhausted chapter retry budget propagate
and nothing is returned.
"""

from __future__ import annotations

import enum
import logging
from typing import List

from ollama_novelist.errors import PlanParseError
from ollama_novelist.llm.ollama_client import GenerationClient
from ollama_novelist.models import ChapterPlan, ChapterPlanEntry, ChapterRecord, Manuscript, NovelResult
from ollama_novelist.utils.validate import fallback_plan
from .chapters import ChapterWriter
from .plot import PlotPipeline
from .storyline import StorylineGenerator

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    IDLE = "idle"
    PLOTTING_PLOT = "plotting_plot"
    REFINING_PLOT = "refining_plot"
    TITLING = "titling"
    STORYLINING = "storylining"
    WRITING_FIRST_CHAPTER = "writing_first_chapter"
    WRITING_CHAPTER = "writing_chapter"
    COMPLETE = "complete"


def fit_plan(plan: ChapterPlan, count: int) -> ChapterPlan:
    """Pad with placeholder entries or truncate so the plan has *count* entries."""
    if len(plan) == count:
        return plan
    logger.warning("Storyline has %d chapters, expected %d – adjusting.", len(plan), count)
    entries: List[ChapterPlanEntry] = plan.entries[:count]
    entries += [ChapterPlanEntry.placeholder(i) for i in range(len(entries) + 1, count + 1)]
    return plan.model_copy(update={"entries": entries})


class NovelAssembler:
    def __init__(
        self,
        client: GenerationClient,
        *,
        plotter: PlotPipeline | None = None,
        storyliner: StorylineGenerator | None = None,
        writer: ChapterWriter | None = None,
    ):
        self.plotter = plotter or PlotPipeline(client)
        self.storyliner = storyliner or StorylineGenerator(client)
        self.writer = writer or ChapterWriter(client)
        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = []

    def _enter(self, state: PipelineState, detail: str = "") -> None:
        self.state = state
        self.history.append(state)
        logger.info("── %s %s", state.value, detail)

    def plan(self, plot: str, chapter_count: int) -> ChapterPlan:
        try:
            plan = self.storyliner.generate_storyline(plot, chapter_count)
        except PlanParseError as e:
            logger.warning("Error parsing storyline JSON: %s", e)
            logger.info("Storyline response: %s", e.text)
            return fallback_plan(chapter_count, source_text=e.text)
        return fit_plan(plan, chapter_count)

    def write_novel(self, prompt: str, chapter_count: int, writing_style: str) -> NovelResult:
        if chapter_count < 1:
            raise ValueError("chapter_count must be ≥1")
        self.history.clear()

        self._enter(PipelineState.PLOTTING_PLOT)
        plots = self.plotter.brainstorm(prompt)
        logger.info("Generated %d plot lines", len(plots))

        self._enter(PipelineState.REFINING_PLOT)
        plot = self.plotter.improve(self.plotter.select(plots))

        self._enter(PipelineState.TITLING)
        title = self.plotter.title(plot)
        logger.info("Title generated: %s", title)

        self._enter(PipelineState.STORYLINING)
        plan = self.plan(plot, chapter_count)
        storyline = plan.source_text
        manuscript = Manuscript.start(storyline)

        self._enter(PipelineState.WRITING_FIRST_CHAPTER, plan[0].key)
        first = self.writer.write_first_chapter(storyline, plan[0], writing_style)
        manuscript.add_chapter(1, first)
        chapters = [first]
        records: List[ChapterRecord] = [self.writer.record(plan[0], first)]

        for i in range(1, chapter_count):
            self._enter(PipelineState.WRITING_CHAPTER, plan[i].key)
            text = self.writer.write_chapter(manuscript.text, storyline, plan[i], writing_style)
            manuscript.add_chapter(i + 1, text)
            chapters.append(text)
            records.append(self.writer.record(plan[i], text))

        self._enter(PipelineState.COMPLETE)
        return NovelResult(manuscript=manuscript.text, title=title, chapters=chapters, records=records)
