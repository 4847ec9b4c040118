"""
plot.py – premise → brainstormed plots → chosen plot → improved plot (+ title).

No retries and no quality checks: whatever the model says is passed on.
"""

from __future__ import annotations

import logging
from typing import List

from ollama_novelist.llm.ollama_client import GenerationClient
from . import prompt_builders as pb

logger = logging.getLogger(__name__)


class PlotPipeline:
    def __init__(self, client: GenerationClient):
        self.client = client

    def brainstorm(self, premise: str) -> List[str]:
        logger.info("Generating plots...")
        return self.client.generate(pb.build_brainstorm_prompt(premise)).split("\n")

    def select(self, plots: List[str]) -> str:
        logger.info("Selecting most engaging plot...")
        return self.client.generate(pb.build_select_prompt(plots))

    def improve(self, plot: str) -> str:
        logger.info("Improving plot...")
        return self.client.generate(pb.build_improve_plot_prompt(plot))

    def run(self, premise: str) -> str:
        return self.improve(self.select(self.brainstorm(premise)))

    def title(self, plot: str) -> str:
        logger.info("Generating title...")
        raw = self.client.generate(pb.build_title_prompt(plot))
        title = raw.strip().strip("\"'*").strip()
        return title or "Untitled"
