"""Terminal front end: memory cards, the category strip and the subcommands."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from memora.models import ALL, CATEGORIES, Category, Memory, MemoryDraft
from memora.vault.export import export_markdown
from memora.vault.store import parse_date

if TYPE_CHECKING:
    from memora.core import Memora

logger = logging.getLogger(__name__)

_MONTHS_ID = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

CONFIRM_DELETE = "Hapus kenangan ini selamanya?"
ALL_LABEL = "Semua"
EMPTY_STATE = "Belum ada memori. Mulailah mengabadikan momen berhargamu hari ini."


def format_date(value: str) -> str:
    """`2024-05-15T18:00:00Z` -> `15 Mei 2024`. Unparseable dates are shown as-is."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.day} {_MONTHS_ID[parsed.month - 1]} {parsed.year}"


def _image_label(image_url: str) -> str:
    if image_url.startswith("data:"):
        mime = image_url[5:].split(";", 1)[0]
        return f"[embedded {mime}, {len(image_url)} chars]"
    return image_url


def format_card(memory: Memory) -> str:
    lines = [
        f"[{memory.id}] {memory.title}",
        f"  {format_date(memory.date)} · {memory.category}",
    ]
    if memory.description:
        lines.append(f"  {memory.description}")
    lines.append(f"  {_image_label(memory.image_url)}")
    return "\n".join(lines)


def format_category_strip(selected: str = ALL) -> str:
    choices = [(ALL, ALL_LABEL)] + [(c.value, c.value) for c in CATEGORIES]
    return "  ".join(f"[{label}]" if value == selected else label for value, label in choices)


def _category_arg(value: str) -> str:
    if value.strip().lower() in (ALL.lower(), ALL_LABEL.lower()):
        return ALL
    category = Category.parse(value)
    if category is None:
        raise argparse.ArgumentTypeError(
            f"invalid category '{value}' (choose from {', '.join(c.value for c in CATEGORIES)})"
        )
    return category.value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memora", description="Personal memory journal")
    parser.add_argument("--config", type=Path, default=None, help="Path to memora.toml")
    sub = parser.add_subparsers(dest="command")

    p_list = sub.add_parser("list", help="Browse memories, newest first")
    p_list.add_argument("-s", "--search", default="", help="Search title and description")
    p_list.add_argument("-c", "--category", type=_category_arg, default=ALL)

    p_add = sub.add_parser("add", help="Save a new memory")
    p_add.add_argument("-t", "--title", required=True)
    p_add.add_argument("-i", "--image", required=True, help="Image file, URL or data URI")
    p_add.add_argument("-d", "--description", default="")
    p_add.add_argument("-c", "--category", type=_category_arg, default=Category.GENERAL.value)
    p_add.add_argument(
        "--suggest-category", action="store_true", help="Let the enhancer pick the category"
    )

    p_delete = sub.add_parser("delete", help="Delete a memory")
    p_delete.add_argument("id")
    p_delete.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    p_reflect = sub.add_parser("reflect", help="Write a reflection for a memory")
    p_reflect.add_argument("id")

    p_export = sub.add_parser("export", help="Export memories as Markdown files")
    p_export.add_argument("dest", type=Path)

    sub.add_parser("categories", help="Show the category list")
    return parser


def _prompt_confirm(memory: Memory) -> bool:
    sys.stdout.write(f"{memory.title}\n{CONFIRM_DELETE} [y/N] ")
    sys.stdout.flush()
    answer = sys.stdin.readline()
    return answer.strip().lower() in ("y", "yes", "ya")


def cmd_list(app: Memora, args: argparse.Namespace) -> int:
    memories = app.browse(args.search, args.category)
    print(format_category_strip(args.category))
    print()
    if not memories:
        print(EMPTY_STATE)
        return 0
    print("\n\n".join(format_card(m) for m in memories))
    return 0


def cmd_add(app: Memora, args: argparse.Namespace) -> int:
    if args.category == ALL:
        print("error: 'All' is a filter, not a category", file=sys.stderr)
        return 2
    draft = MemoryDraft(
        title=args.title,
        description=args.description,
        image_url=args.image,
        category=Category(args.category),
    )
    if not draft.is_submittable:
        print("error: a title and an image are required", file=sys.stderr)
        return 2
    try:
        memory = asyncio.run(app.submit(draft, suggest_category=args.suggest_category))
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    print(format_card(memory))
    return 0


def cmd_delete(app: Memora, args: argparse.Namespace) -> int:
    if app.store.get(args.id) is None:
        print(f"error: no memory with id {args.id}", file=sys.stderr)
        return 1
    confirm = (lambda _m: True) if args.yes else _prompt_confirm
    if app.remove(args.id, confirm):
        print(f"Deleted {args.id}")
    return 0


def cmd_reflect(app: Memora, args: argparse.Namespace) -> int:
    text = asyncio.run(app.reflect(args.id))
    if text is None:
        print(f"error: no memory with id {args.id}", file=sys.stderr)
        return 1
    print(text)
    return 0


def cmd_export(app: Memora, args: argparse.Namespace) -> int:
    paths = export_markdown(app.browse(), args.dest)
    print(f"Exported {len(paths)} memories to {args.dest}")
    return 0


def cmd_categories(app: Memora, args: argparse.Namespace) -> int:
    print(format_category_strip())
    return 0


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "delete": cmd_delete,
    "reflect": cmd_reflect,
    "export": cmd_export,
    "categories": cmd_categories,
}


def needs_enhancer(args: argparse.Namespace) -> bool:
    """Only build a generation engine for commands that call it."""
    return args.command == "reflect" or bool(getattr(args, "suggest_category", False))


def run(app: Memora, args: argparse.Namespace) -> int:
    return COMMANDS[args.command or "list"](app, args)
