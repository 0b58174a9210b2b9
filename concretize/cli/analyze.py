"""CLI command running the full analysis pipeline."""

from __future__ import annotations

import argparse
import json

from concretize.config import load_settings
from concretize.ontology.clients import WikidataClient
from concretize.ontology.linker import EntityLinker
from concretize.pipeline.analyzer import Analyzer


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the ``analyze`` command."""
    parser = subparsers.add_parser("analyze", help="Tag, chunk, parse and optionally link text")
    parser.add_argument("text")
    parser.add_argument("--link", action="store_true", help="Link phrases to Wikidata")
    parser.add_argument("--document", action="store_true", help="Split the text into sentences first")
    parser.add_argument("--graph", action="store_true", help="Print edge lines instead of JSON")
    parser.set_defaults(func=_handle)


def build_analyzer(link: bool) -> Analyzer:
    settings = load_settings()
    linker = None
    if link:
        client = WikidataClient(settings=settings.wikidata)
        linker = EntityLinker(client, settings=settings.linker)
    return Analyzer(linker=linker, max_workers=settings.analyzer.max_workers)


def _handle(args: argparse.Namespace) -> None:
    analyzer = build_analyzer(args.link)
    if args.document:
        analyses = analyzer.analyze_document(args.text, link=args.link)
    else:
        analyses = [analyzer.analyze(args.text, link=args.link)]
    if args.graph:
        for analysis in analyses:
            print(analysis.graph())
        return
    payload = [a.to_dict() for a in analyses]
    print(json.dumps(payload if args.document else payload[0], ensure_ascii=False))


__all__ = ["build_analyzer", "register"]
