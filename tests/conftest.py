# tests/conftest.py
from __future__ import annotations

import json
from typing import Callable, List

import pytest

LONG = "The lamp turned over the black water. " * 40          # > 1000 chars

STORYLINE = json.dumps([
    {"index": 1, "title": "The Bottle", "overview": "Keeper finds a bottle."},
    {"index": 2, "title": "The Sender", "overview": "Keeper sails to find the sender."},
])


class ScriptedClient:
    """Stands in for GenerationClient: answers from a list (or a function of the prompt)."""

    def __init__(self, replies: List[str] | Callable[[str], str]):
        self.replies = replies
        self.prompts: List[str] = []

    def generate(self, prompt: str, model: str | None = None) -> str:
        self.prompts.append(prompt)
        if callable(self.replies):
            return self.replies(prompt)
        return self.replies.pop(0)


def route(prompt: str, storyline: str = STORYLINE) -> str:
    """Answer by looking at which stage the prompt belongs to."""
    if "Generate 10 fantasy novel plots" in prompt:
        return "1. A keeper\n2. A bottle\n3. A storm"
    if "write the final plot" in prompt:
        return "A keeper finds a bottle and follows it."
    if "Improve this plot" in prompt:
        return "A lonely keeper finds a bottle and sails after its sender."
    if "What is the title" in prompt:
        return '"The Bottle at Gull Rock"'
    if "CHAPTER_OVERVIEW_AND_DETAILS" in prompt:
        return f"```json\n{storyline}\n```"
    if "cover art" in prompt:
        return "A lighthouse at dusk. A bottle on the rocks."
    return LONG


@pytest.fixture
def routed_client() -> ScriptedClient:
    return ScriptedClient(route)
