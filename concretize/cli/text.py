"""CLI commands for tagging, chunking, parsing and acronym extraction."""

from __future__ import annotations

import argparse
import json

from concretize.graph.models import format_edges
from concretize.graph.parser import DependencyParser
from concretize.nlp.chunker import chunk
from concretize.nlp.lexicon import Lexicon, default_lexicon
from concretize.nlp.tagger import POSTagger
from concretize.text.acronyms import extract_acronyms, strip_acronym_expansions


def _tagger(args: argparse.Namespace) -> POSTagger:
    lexicon = Lexicon.from_path(args.lexicon) if getattr(args, "lexicon", None) else default_lexicon()
    return POSTagger(lexicon)


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the ``tag``, ``chunk``, ``parse`` and ``acronyms`` commands."""

    tag = subparsers.add_parser("tag", help="Part-of-speech tag a sentence")
    tag.add_argument("text")
    tag.add_argument("--lexicon", help="JSON or YAML lexicon to use instead of the default")
    tag.add_argument("--explain", action="store_true", help="Show the rule that chose each tag")
    tag.set_defaults(func=_handle_tag)

    chunk_parser = subparsers.add_parser("chunk", help="Chunk a sentence into phrases")
    chunk_parser.add_argument("text")
    chunk_parser.add_argument("--lexicon")
    chunk_parser.set_defaults(func=_handle_chunk)

    parse = subparsers.add_parser("parse", help="Print the dependency graph of a sentence")
    parse.add_argument("text")
    parse.add_argument("--lexicon")
    parse.set_defaults(func=_handle_parse)

    acronyms = subparsers.add_parser("acronyms", help="Extract acronym definitions")
    acronyms.add_argument("text")
    acronyms.set_defaults(func=_handle_acronyms)


def _handle_tag(args: argparse.Namespace) -> None:
    decisions = _tagger(args).trace(args.text)
    for decision in decisions:
        if args.explain:
            print(f"{decision.word}\t{decision.tag}\t{decision.source}")
        else:
            print(f"{decision.word}\t{decision.tag}")


def _handle_chunk(args: argparse.Namespace) -> None:
    chunks = chunk(_tagger(args).tag(args.text))
    print(json.dumps([c.to_dict() for c in chunks], ensure_ascii=False))


def _handle_parse(args: argparse.Namespace) -> None:
    chunks = chunk(_tagger(args).tag(strip_acronym_expansions(args.text)))
    print(format_edges(DependencyParser().parse(chunks)))


def _handle_acronyms(args: argparse.Namespace) -> None:
    print(json.dumps(extract_acronyms(args.text), ensure_ascii=False))


__all__ = ["register"]
