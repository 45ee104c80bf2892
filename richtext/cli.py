#!/usr/bin/env python3
"""Command line tools for rich text documents.

Rewrites references in a single DocBook document against a JSON content
directory (see `richtext.storage.json_directory`), prints its index text, or
lists the content it links to and embeds.

Usage:
  richtext to-portable body.xml --directory directory.json > portable.xml
  richtext to-local portable.xml --directory directory.json --output body.xml
  richtext text body.xml
  richtext relations body.xml --directory directory.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rtschema.value import InvalidValueError, RichTextValue

from richtext.config import load_config
from richtext.logging import setup_logging
from richtext.relations import RelationExtractor
from richtext.resolver import ReferenceResolver
from richtext.rewriter import LinkRewriter
from richtext.storage.json_directory import JsonFileContentDirectory
from richtext.text import extract_text

logger = setup_logging()


def _read_value(path: Path) -> RichTextValue:
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        return RichTextValue(path.read_bytes())
    except InvalidValueError as e:
        print(f"Error: {path} is not a valid rich text document: {e}", file=sys.stderr)
        sys.exit(1)


def _write_output(text: str, output: Path | None) -> None:
    if output is None:
        sys.stdout.write(text)
    else:
        output.write_text(text, encoding="utf-8")
        print(f"Wrote {output}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="richtext",
        description="Rewrite, index and inspect rich text (DocBook) documents.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to richtext.toml (default: $RICHTEXT_CONFIG, then ./richtext.toml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log rewriting details to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("to-portable", "Replace local content/location ids with remote ids (export)"),
        ("to-local", "Replace remote ids with local ids, removing unresolvable references (import)"),
        ("relations", "List content ids the document links to and embeds, as JSON"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("input", type=Path, help="Rich text XML file")
        sub.add_argument(
            "--directory",
            type=Path,
            required=True,
            help="JSON file mapping local ids to remote ids",
        )
        if name != "relations":
            sub.add_argument("--output", type=Path, default=None, help="Output file (default: stdout)")

    text = subparsers.add_parser("text", help="Print the document's search index text")
    text.add_argument("input", type=Path, help="Rich text XML file")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging("richtext", level=logging.DEBUG)

    config = load_config(args.config)
    value = _read_value(args.input)

    if args.command == "text":
        print(extract_text(value.xml))
        return

    if not args.directory.exists():
        print(f"Error: directory file not found: {args.directory}", file=sys.stderr)
        sys.exit(1)
    directory = JsonFileContentDirectory(args.directory)

    if args.command == "relations":
        relation_set = RelationExtractor(directory, config).relation_set([value])
        print(json.dumps({"linked": sorted(relation_set.linked), "embedded": sorted(relation_set.embedded)}))
        return

    rewriter = LinkRewriter(ReferenceResolver(directory), config)
    if args.command == "to-portable":
        rewritten = rewriter.to_portable(value)
    else:
        rewritten = rewriter.to_local(value)
    logger.debug({"message": f"Rewrote {args.input} ({args.command})"})
    _write_output(str(rewritten), args.output)


if __name__ == "__main__":
    main()
