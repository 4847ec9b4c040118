"""
ollama-novelist – premise in, EPUB out
 • CLI flags override --config PATH (JSON answers file), which overrides defaults
 • .env is read for OLLAMA_HOST / NOVELIST_MODEL
 • pipeline failures exit 1 without writing the book
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import dotenv
import typer
from pydantic import ValidationError
from rich import print
from rich.markup import escape

from ollama_novelist.errors import NovelistError
from ollama_novelist.generators.assembler import NovelAssembler
from ollama_novelist.generators.chapters import ChapterWriter
from ollama_novelist.llm.ollama_client import GenerationClient
from ollama_novelist.models import RunConfig
from ollama_novelist.publish.cover import describe_cover, write_cover_caption, write_placeholder_cover
from ollama_novelist.publish.epub_builder import build_epub
from ollama_novelist.publish.prompt_log import write_prompt_log
from ollama_novelist.utils.logconf import init

dotenv.load_dotenv()

logger = logging.getLogger("ollama_novelist")

app = typer.Typer(pretty_exceptions_show_locals=False, add_completion=False)


def run(cfg: RunConfig) -> Path:
    """Generate the novel described by *cfg*; returns the .epub path."""
    client = GenerationClient(
        model=cfg.model,
        base_url=cfg.base_url,
        language=cfg.language,
        timeout=cfg.timeout,
    )
    writer = ChapterWriter(
        client,
        min_chars=cfg.min_chapter_chars,
        max_attempts=cfg.max_chapter_attempts,
        backoff=cfg.retry_backoff,
    )
    result = NovelAssembler(client, writer=writer).write_novel(cfg.prompt, cfg.chapters, cfg.writing_style)

    write_prompt_log(cfg.output_dir, cfg.prompt, result.manuscript)

    chapter_objects = [{r.key: r.body} for r in result.records]
    caption = describe_cover(client, json.dumps(chapter_objects, ensure_ascii=False))
    write_cover_caption(cfg.output_dir, caption)

    return build_epub(
        cfg.output_dir,
        result.title,
        cfg.author,
        result.records,
        cover=cfg.cover or write_placeholder_cover(cfg.output_dir),
        language=cfg.book_language,
    )


@app.command()
def main(
    prompt: str | None = typer.Option(None, help="Novel premise"),
    chapters: int | None = typer.Option(None, min=1, help="Number of chapters"),
    style: str | None = typer.Option(None, "--style", help="Writing style description"),
    model: str | None = typer.Option(None, envvar="NOVELIST_MODEL", help="Ollama model to use"),
    output: Path | None = typer.Option(None, help="Output directory"),
    language: str | None = typer.Option(None, help="Output language"),
    author: str | None = typer.Option(None),
    base_url: str | None = typer.Option(None, "--base-url", envvar="OLLAMA_HOST"),
    timeout: float | None = typer.Option(None, help="HTTP timeout in seconds (default: none)"),
    max_chapter_attempts: int | None = typer.Option(None, min=1),
    retry_backoff: float | None = typer.Option(None, min=0.0),
    cover: Path | None = typer.Option(None, exists=True, dir_okay=False, help="Cover image for the EPUB"),
    config: Path | None = typer.Option(None, "--config", exists=True, dir_okay=False),
    log_level: str = typer.Option("INFO"),
):
    try:
        cfg = RunConfig.load(
            config,
            prompt=prompt,
            chapters=chapters,
            writing_style=style,
            model=model,
            output_dir=output,
            language=language,
            author=author,
            base_url=base_url,
            timeout=timeout,
            max_chapter_attempts=max_chapter_attempts,
            retry_backoff=retry_backoff,
            cover=cover,
        )
    except ValidationError as exc:
        print(f"[red]✘ Invalid settings:[/]\n{escape(str(exc))}")
        raise typer.Exit(code=1)
    init(log_level, cfg.output_dir / "logs")
    if config:
        print(f"[yellow]Loaded answers from {config}[/]")

    print("[bold cyan]─── Ollama Novelist ───[/]\n")
    print(f'Prompt: "{cfg.prompt}"')
    print(f"Chapters: {cfg.chapters}  ·  model: {cfg.model}")

    try:
        epub_path = run(cfg)
    except NovelistError as exc:
        logger.exception("Novel generation failed")
        print(f"[red]✘ Novel generation failed: {exc}[/]")
        raise typer.Exit(code=1)

    print(f"[green]✔ Novel generation complete → {epub_path}[/]")


if __name__ == "__main__":
    app()
