"""Markdown journal export — one file per memory with YAML frontmatter."""

from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path

import frontmatter

from memora.images import decode_data_uri
from memora.models import Memory
from memora.vault.store import parse_date

logger = logging.getLogger(__name__)


def _slugify(title: str) -> str:
    """Minimal slug: strip illegal chars, spaces to hyphens."""
    slug = re.sub(r'[<>:"/\\|?*\n\r\t]', "", title)
    slug = slug.strip().replace(" ", "-")
    return slug or "untitled"


def _file_stem(memory: Memory) -> str:
    """`<YYYY-MM-DD>-<slug>`, or just the slug when the date does not parse."""
    slug = _slugify(memory.title)
    parsed = parse_date(memory.date)
    if parsed is None:
        return slug
    return f"{parsed:%Y-%m-%d}-{slug}"


def _unique_stem(dest: Path, stem: str) -> str:
    candidate = stem
    counter = 2
    while (dest / f"{candidate}.md").exists():
        candidate = f"{stem}-{counter}"
        counter += 1
    return candidate


def _write_image(memory: Memory, dest: Path, stem: str) -> str:
    """Return the frontmatter image reference, writing embedded images to disk."""
    image = decode_data_uri(memory.image_url)
    if image is None:
        return memory.image_url
    ext = mimetypes.guess_extension(image.mime_type) or ".img"
    name = f"{stem}{ext}"
    (dest / name).write_bytes(image.data)
    return name


def render_memory(memory: Memory, image_ref: str) -> str:
    post = frontmatter.Post(
        memory.description,
        id=memory.id,
        title=memory.title,
        date=memory.date,
        category=memory.category,
        image=image_ref,
    )
    return frontmatter.dumps(post) + "\n"


def export_markdown(memories: list[Memory], dest: Path) -> list[Path]:
    """Write memories as Markdown files into `dest`. Returns the written paths."""
    dest.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for memory in memories:
        stem = _unique_stem(dest, _file_stem(memory))
        image_ref = _write_image(memory, dest, stem)
        path = dest / f"{stem}.md"
        path.write_text(render_memory(memory, image_ref), encoding="utf-8")
        written.append(path)
    logger.info("Exported %d memories to %s", len(written), dest)
    return written
