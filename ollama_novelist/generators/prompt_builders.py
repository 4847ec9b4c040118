"""
Prompt builders
• One function per generation call in the pipeline.
• Plain-text prompts (Ollama /api/generate takes a single string).
• Storyline prompts ask for tagged chapter records, see STORYLINE_FORMAT.
"""

from __future__ import annotations

import json
from typing import List

from ollama_novelist.models import ChapterPlanEntry

PLOT_COUNT = 10

STORYLINE_FORMAT = (
    '[{"index": CHAPTER_NUMBER, "title": "CHAPTER_TITLE", '
    '"overview": "CHAPTER_OVERVIEW_AND_DETAILS"}, ...]'
)


def _entry_json(entry: ChapterPlanEntry) -> str:
    return json.dumps(entry.as_legacy(), ensure_ascii=False)


# ─── plot ────────────────────────────────────────────────────────────────
def build_brainstorm_prompt(premise: str) -> str:
    return (
        "You are a creative assistant that generates engaging fantasy novel plots.\n\n"
        f"Generate {PLOT_COUNT} fantasy novel plots based on this prompt: {premise}"
    )


def build_select_prompt(plots: List[str]) -> str:
    candidates = "\n".join(plots)
    return (
        "You are an expert in writing fantastic fantasy novel plots.\n\n"
        f"Here are a number of possible plots for a new novel:\n{candidates}\n\n"
        "Now, write the final plot that we will go with. It can be one of these, "
        "a mix of the best elements of multiple, or something completely new and better. "
        "The most important thing is the plot should be fantastic, unique, and engaging."
    )


def build_improve_plot_prompt(plot: str) -> str:
    return f"You are an expert in improving and refining story plots.\n\nImprove this plot: {plot}"


def build_title_prompt(plot: str) -> str:
    return (
        "You are an expert writer.\n\n"
        f"Here is the plot: {plot}\n\n"
        "What is the title of this book? Just respond with the title, do nothing else."
    )


# ─── storyline ───────────────────────────────────────────────────────────
def build_storyline_prompt(plot: str, chapter_count: int) -> str:
    return (
        "You are a world-class fantasy writer. Your job is to write a detailed storyline, "
        "complete with chapters, for a fantasy novel. Don't be flowery -- you want to get the "
        "message across in as few words as possible. But those words should contain lots of "
        "information.\n\n"
        f"Write a fantastic storyline with exactly {chapter_count} chapters and high-level "
        f"details based on this plot: {plot}\n\n"
        f"Output the response as a JSON array following this template: {STORYLINE_FORMAT}"
    )


def build_improve_storyline_prompt(draft: str, chapter_count: int) -> str:
    return (
        "You are a world-class fantasy writer. Your job is to take your student's rough initial "
        "draft of the storyline of a fantasy novel, and rewrite it to be significantly better.\n\n"
        f"Here is the draft storyline they wrote: {draft}\n\n"
        "Now, rewrite the storyline, in a way that is far superior to your student's version. "
        f"It should have the same number of chapters ({chapter_count}), but it should be much "
        "improved in as many ways as possible. Remember to answer with a JSON array in this "
        f"format: {STORYLINE_FORMAT}"
    )


# ─── chapters ────────────────────────────────────────────────────────────
def build_first_chapter_prompt(storyline: str, entry: ChapterPlanEntry, style: str) -> str:
    return (
        "You are a world-class fantasy writer.\n\n"
        f"Here is the high-level plot to follow: {storyline}\n\n"
        f"Write the first chapter of this novel: `{_entry_json(entry)}`.\n\n"
        "Make it incredibly unique, engaging, and well-written.\n\n"
        f"Here is a description of the writing style you should use: `{style}`\n\n"
        "Include only the chapter text. There is no need to rewrite the chapter name."
    )


def build_refine_first_chapter_prompt(storyline: str, draft: str, style: str) -> str:
    return (
        "You are a world-class fantasy writer. Your job is to take your student's rough initial "
        "draft of the first chapter of their fantasy novel, and rewrite it to be significantly "
        "better, with much more detail.\n\n"
        f"Here is the high-level plot you asked your student to follow: {storyline}\n\n"
        f"Here is the first chapter they wrote: {draft}\n\n"
        "Now, rewrite the first chapter of this novel, in a way that is far superior to your "
        "student's chapter. It should still follow the exact same plot, but it should be far more "
        "detailed, much longer, and more engaging. "
        f"Here is a description of the writing style you should use: `{style}`"
    )


def build_chapter_prompt(manuscript: str, storyline: str, entry: ChapterPlanEntry, style: str) -> str:
    return (
        "You are a world-class fantasy writer.\n\n"
        f"Plot: {storyline}\n"
        f"Previous Chapters: {manuscript}\n\n"
        "Write the next chapter of this novel, following the plot and taking in the previous "
        f"chapters as context. Here is the plan for this chapter: {_entry_json(entry)}\n\n"
        f"Here is a description of the writing style you should use: `{style}`\n\n"
        "Write it beautifully. Include only the chapter text. There is no need to rewrite the "
        "chapter name."
    )


# ─── cover ───────────────────────────────────────────────────────────────
def build_cover_prompt(plot: str) -> str:
    return (
        "You are a creative assistant that writes a spec for the cover art of a book, based on "
        "the book's plot.\n\n"
        f"Plot: {plot}\n\n"
        "Describe the cover we should create, based on the plot. This should be two sentences "
        "long, maximum."
    )
