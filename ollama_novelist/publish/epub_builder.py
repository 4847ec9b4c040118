"""
epub_builder.py – turn chapter records into an .epub via ebooklib.

Each record becomes one XHTML document:

    <h1>Chapter 2 - The Bottle</h1><p>…</p><p>…</p>

The table of contents uses the part of the key after " - ".
"""

from __future__ import annotations

import html
import logging
import uuid
from pathlib import Path
from typing import List

from ebooklib import epub

from ollama_novelist.models import ChapterRecord
from ollama_novelist.publish.prompt_log import safe_filename
from ollama_novelist.utils.formatter import paragraphs

logger = logging.getLogger(__name__)

STYLE = """
body { font-family: Georgia, serif; margin: 5%; text-align: justify; }
h1 { text-align: center; page-break-before: always; }
p { text-indent: 1em; margin: 0.5em 0; }
"""


def chapter_html(record: ChapterRecord) -> str:
    body = "".join(f"<p>{html.escape(p)}</p>" for p in paragraphs(record.body))
    return f"<h1>{html.escape(record.key)}</h1>{body}"


def build_epub(
    output_dir: Path,
    title: str,
    author: str,
    records: List[ChapterRecord],
    cover: Path | None = None,
    language: str = "en",
) -> Path:
    logger.info("Creating EPUB file...")
    book = epub.EpubBook()
    book.set_identifier(f"novel-{uuid.uuid4().hex}")
    book.set_title(title)
    book.set_language(language)
    book.add_author(author)

    if cover is not None:
        book.set_cover(f"cover{cover.suffix or '.png'}", cover.read_bytes())

    css = epub.EpubItem(uid="style_default", file_name="style/default.css",
                        media_type="text/css", content=STYLE)
    book.add_item(css)

    items = []
    for n, rec in enumerate(records, 1):
        ch = epub.EpubHtml(title=rec.title, file_name=f"chapter_{n}.xhtml", lang=language)
        ch.content = chapter_html(rec)
        ch.add_item(css)
        book.add_item(ch)
        items.append(ch)

    book.toc = tuple(items)
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", *items]

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{safe_filename(title)}.epub"
    epub.write_epub(str(path), book, {})
    logger.info("EPUB file created at %s", path)
    return path
