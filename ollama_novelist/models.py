# ollama_novelist/models.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, FilePath

DEFAULT_PROMPT = "A kingdom hidden deep in the forest, where every tree is a portal to another world."
DEFAULT_STYLE = "Clear and easily understandable, similar to a young adult novel. Lots of dialogue."
DEFAULT_MODEL = "deepseek-r1:7b"
DEFAULT_BASE_URL = "http://localhost:11434"


class ChapterPlanEntry(BaseModel):
    index: int = Field(..., ge=1)
    title: str
    overview: str

    @property
    def key(self) -> str:
        return f"Chapter {self.index} - {self.title}"

    def as_legacy(self) -> Dict[str, str]:
        return {self.key: self.overview}

    @classmethod
    def placeholder(cls, index: int) -> "ChapterPlanEntry":
        return cls(index=index, title="Untitled", overview=f"This is chapter {index}")


class ChapterPlan(BaseModel):
    entries: List[ChapterPlanEntry]
    source_text: str = ""
    fallback: bool = False

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, i: int) -> ChapterPlanEntry:
        return self.entries[i]

    def keys(self) -> List[str]:
        return [e.key for e in self.entries]


class ChapterRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    body: str

    @property
    def title(self) -> str:
        return self.key.split(" - ", 1)[1] if " - " in self.key else self.key


class Manuscript(BaseModel):
    """Running storyline + chapter text, fed back as context for later chapters."""

    text: str = ""

    @classmethod
    def start(cls, plan_text: str) -> "Manuscript":
        return cls(text=f"Storyline:\n{plan_text}\n\n")

    def add_chapter(self, number: int, body: str) -> None:
        self.text += f"Chapter {number}:\n{body}\n"


class NovelResult(BaseModel):
    manuscript: str
    title: str
    chapters: List[str]
    records: List[ChapterRecord]


class RunConfig(BaseModel):
    prompt: str = DEFAULT_PROMPT
    chapters: int = Field(3, ge=1)
    writing_style: str = DEFAULT_STYLE
    model: str = Field(DEFAULT_MODEL, min_length=1)
    language: str | None = "English"
    base_url: str = DEFAULT_BASE_URL
    output_dir: Path = Path("./output")
    author: str = "Ollama Author"
    timeout: float | None = None
    max_chapter_attempts: int = Field(5, ge=1)
    retry_backoff: float = Field(0.0, ge=0)
    min_chapter_chars: int = Field(1000, ge=0)
    cover: FilePath | None = None
    book_language: str = "en"

    @classmethod
    def load(cls, path: Path | None = None, **overrides) -> "RunConfig":
        """Defaults, then the JSON answers file (if any), then non-None overrides."""
        data = json.loads(path.read_text("utf-8")) if path else {}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)
