"""CLI commands for concept deduplication against a node store."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import jsonschema

from concretize.config import load_settings
from concretize.errors import PersistenceError
from concretize.gdc.manager import GDCManager
from concretize.gdc.schema import validate_source_graph
from concretize.storage.store import NodeStore


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Register the ``gdc`` command group."""

    parser = subparsers.add_parser("gdc", help="Concept deduplication")
    gdc_sub = parser.add_subparsers(dest="gdc_command")

    ingest = gdc_sub.add_parser("ingest", help="Upsert a JSON-LD source graph and reconcile concepts")
    ingest.add_argument("graph", type=Path)
    ingest.add_argument("--db", type=Path, required=True)
    ingest.add_argument("--update", metavar="SOURCE_ID", help="Source node being re-processed")
    ingest.set_defaults(func=_handle_ingest)

    remove = gdc_sub.add_parser("remove", help="Delete source nodes and reconcile concepts")
    remove.add_argument("ids", nargs="+")
    remove.add_argument("--db", type=Path, required=True)
    remove.set_defaults(func=_handle_remove)

    list_parser = gdc_sub.add_parser("list", help="List concept nodes in the store")
    list_parser.add_argument("--db", type=Path, required=True)
    list_parser.set_defaults(func=_handle_list)


def _handle_ingest(args: argparse.Namespace) -> None:
    try:
        payload = json.loads(args.graph.read_text(encoding="utf-8"))
        nodes = validate_source_graph(payload)
    except (OSError, ValueError, jsonschema.ValidationError) as exc:
        raise SystemExit(f"Invalid source graph: {exc}") from exc
    store = NodeStore(args.db)
    try:
        manager = GDCManager(store, settings=load_settings().gdc)
        result = manager.update_and_save(nodes, store.all_nodes(), args.update)
    except PersistenceError as exc:
        raise SystemExit(f"Error: {exc}") from exc
    finally:
        store.close()
    print(json.dumps({"upserted": result.upserted, "deleted": result.deleted}, ensure_ascii=False))


def _handle_remove(args: argparse.Namespace) -> None:
    store = NodeStore(args.db)
    try:
        manager = GDCManager(store, settings=load_settings().gdc)
        result = manager.remove_and_save(args.ids, store.all_nodes())
    except PersistenceError as exc:
        raise SystemExit(f"Error: {exc}") from exc
    finally:
        store.close()
    print(json.dumps({"upserted": result.upserted, "deleted": result.deleted}, ensure_ascii=False))


def _handle_list(args: argparse.Namespace) -> None:
    settings = load_settings().gdc
    store = NodeStore(args.db)
    try:
        concepts = [n for n in store.all_nodes() if str(n.get("@id", "")).startswith(settings.base_iri)]
    finally:
        store.close()
    print(json.dumps(concepts, ensure_ascii=False))


__all__ = ["register"]
