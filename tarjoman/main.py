"""
Tarjoman - command-line entry point.

Examples:
    python -m tarjoman.main keys add AIza...
    python -m tarjoman.main translate "Bonjour tout le monde" --to fa
    python -m tarjoman.main history --search bonjour
    python -m tarjoman.main languages
    python -m tarjoman.main --memory keys list
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from tarjoman.config import configure_logging
from tarjoman.core.errors import TarjomanError
from tarjoman.core.utils import history_timestamp, mask_secret
from tarjoman.i18n.languages import AUTO_DETECT, normalize_language_code
from tarjoman.services import Services, create_services
from tarjoman.storage.local import InMemoryRecordStorage, SQLiteRecordStorage
from tarjoman.storage.store import PersistentStore, get_store


# =============================================================================
# Commands
# =============================================================================


async def cmd_translate(services: Services, args: argparse.Namespace) -> int:
    source = normalize_language_code(args.source)
    target = normalize_language_code(args.target)
    outcome = await services.session.translate(args.text, source, target)

    result = outcome.result
    names = await services.languages.get_language_names()
    detected = result.detected_source_language
    print(f"[{names.get(detected, detected.upper())} → {names.get(target, target.upper())}]")
    print(result.translated_text)

    if outcome.language_registered and result.new_language_info:
        info = result.new_language_info
        print(f"  ✓ Learned new language: {info.english_name} ({info.code})")
    return 0


async def cmd_languages(services: Services, args: argparse.Namespace) -> int:
    for lang in await services.languages.get_all_languages():
        marker = " (rtl)" if lang.is_rtl else ""
        print(f"  • {lang.code:<6} {lang.english_name} - {lang.name}{marker}")
    return 0


async def cmd_history(services: Services, args: argparse.Namespace) -> int:
    if args.clear:
        await services.history.clear()
        print("History cleared.")
        return 0

    if args.delete is not None:
        await services.history.delete(args.delete)
        print(f"Deleted {args.delete}.")
        return 0

    records = await services.history.search(args.search or "")
    if not records:
        print("No matching translations." if args.search else "History is empty.")
        return 0

    for record in records:
        when = history_timestamp(record.id).strftime("%Y-%m-%d %H:%M")
        print(f"#{record.id}  {when}  {record.source_lang} → {record.target_lang}")
        print(f"    {record.source_text}")
        print(f"    {record.target_text}")
    return 0


async def cmd_keys(services: Services, args: argparse.Namespace) -> int:
    if args.action == "add":
        try:
            keys = await services.credentials.add_credential(args.value or "")
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"  ✓ API key added ({len(keys)} configured)")
        return 0

    if args.action == "remove":
        try:
            index = int(args.value)
            keys = await services.credentials.remove_credential(index)
        except (TypeError, ValueError, IndexError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"  ✓ API key removed ({len(keys)} configured)")
        return 0

    keys = await services.credentials.list_credentials()
    if not keys:
        print("No API keys configured.")
    for index, key in enumerate(keys):
        print(f"  {index}: {mask_secret(key)}")
    return 0


COMMANDS = {
    "translate": cmd_translate,
    "languages": cmd_languages,
    "history": cmd_history,
    "keys": cmd_keys,
}


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tarjoman", description="LLM-powered translator")
    parser.add_argument("--db", help="Path to the database file (overrides TARJOMAN_DATABASE_PATH)")
    parser.add_argument(
        "--memory", action="store_true", help="Keep everything in memory for this run only"
    )
    parser.add_argument("--log-level", help="Logging level (default from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("translate", help="Translate text")
    p.add_argument("text")
    p.add_argument("--from", dest="source", default=AUTO_DETECT)
    p.add_argument("--to", dest="target", required=True)

    sub.add_parser("languages", help="List known languages")

    p = sub.add_parser("history", help="Show translation history")
    p.add_argument("--search", help="Only show translations containing this text")
    p.add_argument("--delete", type=int, metavar="ID", help="Delete one translation")
    p.add_argument("--clear", action="store_true", help="Delete all history")

    p = sub.add_parser("keys", help="Manage API keys")
    p.add_argument("action", choices=["list", "add", "remove"])
    p.add_argument("value", nargs="?", help="Key to add, or index to remove")

    return parser


async def run(args: argparse.Namespace) -> int:
    if args.memory:
        store = PersistentStore(InMemoryRecordStorage())
    elif args.db:
        store = PersistentStore(SQLiteRecordStorage(args.db))
    else:
        store = get_store()
    services = create_services(store)
    try:
        return await COMMANDS[args.command](services, args)
    except TarjomanError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await store.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
