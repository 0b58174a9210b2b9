import sqlite3

import jsonschema
import pytest

from concretize.config import GDCSettings
from concretize.errors import PersistenceError
from concretize.gdc.manager import GDCManager
from concretize.gdc.models import ConceptNode, SourceNode, concept_identifier
from concretize.gdc.schema import validate_source_graph
from concretize.gdc.service import GDCService
from concretize.storage.store import NodeStore

SETTINGS = GDCSettings()
TEXT = SETTINGS.text_properties[0]
LABEL = SETTINGS.label_property
BASE = SETTINGS.base_iri
PERSON = SETTINGS.excluded_types[0]


def source(identifier, *texts, prop=TEXT, types=("http://example.org/Document",)):
    return {"@id": identifier, "@type": list(types), prop: [{"@value": t} for t in texts]}


@pytest.fixture
def store():
    node_store = NodeStore()
    yield node_store
    node_store.close()


@pytest.fixture
def manager(store):
    return GDCManager(store, settings=SETTINGS)


def test_concept_identifier_is_content_addressed():
    first = concept_identifier("Report", BASE)
    assert first == concept_identifier("report", BASE)
    assert first.startswith(BASE + "/")
    assert len(first.rsplit("/", 1)[1]) == 16
    assert first != concept_identifier("team", BASE)


def test_source_node_reads_only_text_properties():
    node = SourceNode.from_jsonld(
        {
            "@id": "s1",
            "@type": "Doc",
            TEXT: [{"@value": "The team"}, {"@value": "  "}, {"@id": "x"}],
            "http://example.org/other": [{"@value": "ignored"}],
        },
        SETTINGS.text_properties,
    )
    assert node.types == ("Doc",)
    assert list(node.iter_texts()) == ["The team"]


def test_service_deduplicates_phrases_across_nodes():
    service = GDCService(settings=SETTINGS)
    concepts = service.process(
        [
            source("s1", "The team wrote the report."),
            source("s2", "The report", prop=LABEL),
            source("p1", "The report", types=(PERSON,)),
        ]
    )
    by_label = {c.label: c for c in concepts}
    assert list(by_label) == ["team", "write", "report"]
    assert by_label["report"].backlinks == ["s1", "s2"]
    assert by_label["team"].identifier == concept_identifier("team", BASE)


def test_backlinks_are_never_duplicated():
    concept = ConceptNode("id", "report")
    concept.add_backlink("s1")
    concept.add_backlink("s1")
    assert concept.backlinks == ["s1"]
    service = GDCService(settings=SETTINGS)
    concepts = service.process([source("s1", "The report.", "A report.")])
    assert [c.backlinks for c in concepts] == [["s1"]]


def test_update_and_save_writes_sources_and_concepts(store, manager):
    nodes = [source("s1", "The team wrote the report.")]
    result = manager.update_and_save(nodes, [])
    keys = store.keys()
    assert "s1" in keys
    concept_keys = [k for k in keys if manager.is_concept_key(k)]
    assert len(concept_keys) == 3
    assert result.deleted == []
    stored = store.get(concept_identifier("report", BASE))
    assert stored[LABEL] == [{"@value": "report"}]
    assert stored[SETTINGS.backlink_property] == [{"@id": "s1"}]
    assert stored["@type"] == [SETTINGS.type_iri]


def test_orphaned_concepts_are_deleted(store, manager):
    manager.update_and_save([source("s1", "The report.")], [])
    old = concept_identifier("report", BASE)
    assert old in store.keys()
    updated = [source("s1", "The budget.")]
    result = manager.update_and_save(updated, [source("s1", "The report.")])
    assert old in result.deleted
    assert old not in store.keys()
    assert concept_identifier("budget", BASE) in store.keys()


def test_stored_concept_nodes_are_not_mined_as_sources(store, manager):
    manager.update_and_save([source("s1", "The report.")], [])
    result = manager.update_and_save([source("s2", "The budget.")], store.all_nodes())
    assert sorted(c.label for c in result.concepts) == ["budget", "report"]
    assert all(not manager.is_concept_key(b) for c in result.concepts for b in c.backlinks)
    report = store.get(concept_identifier("report", BASE))
    assert report[SETTINGS.backlink_property] == [{"@id": "s1"}]

    removed = manager.remove_and_save(["s2"], store.all_nodes())
    assert [c.label for c in removed.concepts] == ["report"]


def test_shared_concepts_survive_partial_removal(store, manager):
    corpus = [source("s1", "The report."), source("s2", "The report.")]
    manager.update_and_save(corpus, [])
    result = manager.remove_and_save(["s1"], corpus)
    report = store.get(concept_identifier("report", BASE))
    assert report[SETTINGS.backlink_property] == [{"@id": "s2"}]
    assert "s1" in result.deleted
    assert "s1" not in store.keys()


def test_owned_child_records_are_removed(store, manager):
    source_id = "http://example.org/DSQ_abc123"
    with store.transaction() as txn:
        txn.put("http://example.org/Act_abc123_1", {"@id": "child"})
        txn.put("http://example.org/Person_abc123_1", {"@id": "shared"})
        txn.put("http://example.org/Act_zzz999_1", {"@id": "other"})
        txn.put("sync_state", {"@id": "sync_state"})
    manager.update_and_save([source(source_id, "The report.")], [], updated_source_id=source_id)
    keys = store.keys()
    assert "http://example.org/Act_abc123_1" not in keys
    assert "http://example.org/Person_abc123_1" in keys
    assert "http://example.org/Act_zzz999_1" in keys
    assert "sync_state" in keys
    assert source_id in keys


def test_failed_transaction_rolls_back_and_raises(store, manager, monkeypatch):
    manager.update_and_save([source("s1", "The report.")], [])
    before = store.all_nodes()

    from concretize.storage import store as store_module

    original_put = store_module.StoreTransaction.put

    def failing_put(self, key, node):
        if key == "s2":
            raise sqlite3.OperationalError("disk I/O error")
        return original_put(self, key, node)

    monkeypatch.setattr(store_module.StoreTransaction, "put", failing_put)
    with pytest.raises(PersistenceError) as excinfo:
        manager.update_and_save([source("s2", "The budget.")], [source("s1", "The report.")])
    assert excinfo.value.operation == "update_and_save"
    assert store.all_nodes() == before


def test_reconciliation_blocks_other_writers_after_listing_keys(tmp_path, monkeypatch):
    path = tmp_path / "nodes.db"
    store = NodeStore(path)
    manager = GDCManager(store, settings=SETTINGS)
    manager.update_and_save([source("s1", "The report.")], [])

    from concretize.storage import store as store_module

    original_keys = store_module.StoreTransaction.keys
    outcomes = []

    def keys_then_concurrent_insert(self):
        keys = original_keys(self)
        other = sqlite3.connect(str(path), timeout=0)
        try:
            with other:
                other.execute("INSERT INTO nodes(key, data) VALUES (?, ?)", (f"{BASE}stale", "{}"))
            outcomes.append("wrote")
        except sqlite3.OperationalError as exc:
            outcomes.append(str(exc))
        finally:
            other.close()
        return keys

    monkeypatch.setattr(store_module.StoreTransaction, "keys", keys_then_concurrent_insert)
    try:
        manager.update_and_save([source("s2", "The budget.")], [source("s1", "The report.")])
        assert outcomes == ["database is locked"]
        assert store.get(f"{BASE}stale") is None
        assert store.get("s2") is not None
    finally:
        store.close()


def test_file_backed_store_persists(tmp_path):
    path = tmp_path / "nodes.db"
    store = NodeStore(path)
    GDCManager(store, settings=SETTINGS).update_and_save([source("s1", "The report.")], [])
    store.close()
    reopened = NodeStore(path)
    try:
        assert "s1" in reopened.keys()
    finally:
        reopened.close()


def test_validate_source_graph():
    nodes = validate_source_graph({"@graph": [{"@id": "s1", "@type": "Doc"}]})
    assert nodes == [{"@id": "s1", "@type": "Doc"}]
    with pytest.raises(jsonschema.ValidationError):
        validate_source_graph({"@graph": [{"@type": "Doc"}]})
    with pytest.raises(jsonschema.ValidationError):
        validate_source_graph({"nodes": []})
