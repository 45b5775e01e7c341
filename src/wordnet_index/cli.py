"""
Command-line interface for querying an indexed WordNet.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from wordnet_index import __version__
from wordnet_index.config import BACKENDS, LoadOptions, load_config
from wordnet_index.exceptions import WordnetIndexError
from wordnet_index.exporter import export_to_lmf
from wordnet_index.lmf import LMFProvider
from wordnet_index.loader import clear_persisted, load_wordnet
from wordnet_index.models import LexicalEntry
from wordnet_index.wordnet import WordNet

_LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the wordnet-index CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    configure_logging(args.verbose)
    try:
        return args.func(args)
    except FileNotFoundError as e:
        print(f"\n  [ERROR] {e}", file=sys.stderr)
        return 1
    except WordnetIndexError as e:
        print(f"\n  [ERROR] {e}", file=sys.stderr)
        return 1


def configure_logging(verbosity: int) -> None:
    """Map -v counts onto log levels (WARNING, INFO, DEBUG)."""
    level = _LOG_LEVELS[min(verbosity, len(_LOG_LEVELS) - 1)]
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wordnet-index",
        description="Look up words in a WN-LMF lexical resource",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file",
    )
    parser.add_argument(
        "--source",
        type=Path,
        help="WN-LMF XML file to index",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory for the snapshot and database",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        help="Storage backend (default: memory)",
    )
    parser.add_argument(
        "--force-rebuild",
        action="store_true",
        default=None,
        help="Discard persisted data and rebuild from the source",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # define command
    define_parser = subparsers.add_parser(
        "define",
        help="Show the senses of a word",
    )
    define_parser.add_argument("word", help="Word to look up")
    define_parser.add_argument(
        "pos",
        nargs="?",
        help="Part of speech (n, v, a, r, s or a long name)",
    )
    define_parser.set_defaults(func=cmd_define)

    # random command
    random_parser = subparsers.add_parser(
        "random",
        help="Show a randomly chosen entry",
    )
    random_parser.set_defaults(func=cmd_random)

    # export command
    export_parser = subparsers.add_parser(
        "export",
        help="Write the indexed data to WN-LMF XML",
    )
    export_parser.add_argument("output", type=Path, help="Destination file")
    export_parser.add_argument(
        "--lexicon",
        action="append",
        dest="lexicons",
        help="Lexicon id to export (repeatable; default: all)",
    )
    export_parser.set_defaults(func=cmd_export)

    # clear-db command
    clear_parser = subparsers.add_parser(
        "clear-db",
        help="Delete the snapshot and database",
    )
    clear_parser.set_defaults(func=cmd_clear_db)

    return parser


def resolve_options(args: argparse.Namespace) -> LoadOptions:
    """Combine the config file (if any) with command-line overrides."""
    base = load_config(args.config) if args.config else LoadOptions()
    return base.with_overrides(
        data_dir=args.data_dir,
        backend=args.backend,
        force_rebuild=args.force_rebuild,
        source=args.source,
    )


def _open(args: argparse.Namespace) -> WordNet:
    options = resolve_options(args)
    provider = LMFProvider(options.source) if options.source else None
    return load_wordnet(provider, options)


def cmd_define(args: argparse.Namespace) -> int:
    """Handle define command."""
    with _open(args) as wordnet:
        entries = wordnet.lookup_entries(args.word, args.pos)
        if not entries:
            print(f"No definitions found for {args.word!r}")
            return 1
        for entry in entries:
            _print_entry(wordnet, entry)
    return 0


def cmd_random(args: argparse.Namespace) -> int:
    """Handle random command."""
    with _open(args) as wordnet:
        _print_entry(wordnet, wordnet.get_random_entry())
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Handle export command."""
    with _open(args) as wordnet:
        export_to_lmf(wordnet, args.output, lexicon_ids=args.lexicons)
    print(f"Exported to {args.output}")
    return 0


def cmd_clear_db(args: argparse.Namespace) -> int:
    """Handle clear-db command."""
    removed = clear_persisted(resolve_options(args))
    if not removed:
        print("Nothing to remove.")
    for path in removed:
        print(f"Removed {path}")
    return 0


def _print_entry(wordnet: WordNet, entry: LexicalEntry) -> None:
    lemma = entry.lemma
    print(f"\n{lemma.written_form} ({lemma.pos.label})")
    if entry.pronunciations:
        prons = ", ".join(
            f"/{p.text}/" + (f" [{p.variety}]" if p.variety else "")
            for p in entry.pronunciations
        )
        print(f"  Pronunciation: {prons}")

    for n, sense in enumerate(entry.senses, 1):
        try:
            view = wordnet.describe_synset(sense.synset, lemma.written_form)
        except WordnetIndexError as e:
            print(f"  {n}. [missing synset {sense.synset}: {e}]")
            continue
        definition = (
            view.synset.definitions[0].text
            if view.synset.definitions else "(no definition)"
        )
        print(f"  {n}. {definition}")
        for example in view.synset.examples:
            print(f"       \"{example.text}\"")
        _print_list("Synonyms", view.synonyms)
        _print_list("Antonyms", view.antonyms)
        _print_list("Hypernyms", view.hypernyms)
        _print_list("Hyponyms", view.hyponyms)


def _print_list(label: str, items: tuple[str, ...]) -> None:
    if items:
        print(f"       {label}: {', '.join(items)}")


if __name__ == "__main__":
    sys.exit(main())
