from concretize.config import LinkerSettings
from concretize.errors import ExternalLookupError
from concretize.nlp.taxonomy import ChunkType
from concretize.ontology.clients import SearchHit
from concretize.ontology.linker import EntityLinker, LinkContext, claim_targets


def instance_of(*targets):
    return {
        "claims": {
            "P31": [{"mainsnak": {"datavalue": {"value": {"id": t}}}} for t in targets],
        }
    }


class FakeClient:
    """In-memory stand-in for :class:`WikidataClient`."""

    def __init__(self, hits, entities=None, failing_ids=(), failing_terms=(), broken_ids=()):
        self.hits = hits
        self.entities = entities or {}
        self.failing_ids = set(failing_ids)
        self.failing_terms = set(failing_terms)
        self.broken_ids = set(broken_ids)
        self.searched = []

    def search(self, term):
        self.searched.append(term)
        if term in self.failing_terms:
            raise ExternalLookupError("search", "timeout")
        return list(self.hits.get(term, []))

    def get_entities(self, ids):
        ids = list(ids)
        if self.failing_ids.intersection(ids):
            raise ExternalLookupError("get_entities", "timeout")
        if self.broken_ids.intersection(ids):
            raise KeyError(sorted(self.broken_ids)[0])
        return {i: self.entities[i] for i in ids if i in self.entities}

    def entity_iri(self, identifier):
        return f"http://www.wikidata.org/entity/{identifier}"


def test_search_cascade_for_multiword_and_single_word():
    linker = EntityLinker(FakeClient({}))
    assert linker.search_cascade("Quarterly Reports") == ["quarterly reports", "reports", "report"]
    assert linker.search_cascade("reports") == ["reports", "report"]
    assert linker.search_cascade("team") == ["team"]


def test_best_candidate_above_floor_is_linked():
    hits = {
        "report": [
            SearchHit("Q1", "Report", "a written report"),
            SearchHit("Q2", "Reporter", None),
        ]
    }
    linker = EntityLinker(FakeClient(hits))
    linked = linker.link("report")
    assert linked is not None
    assert linked.iri == "http://www.wikidata.org/entity/Q1"
    # label 10, description 3, description bonus 1
    assert linked.confidence == 14


def test_candidates_below_floor_yield_none():
    hits = {"report": [SearchHit("Q1", "Something else", None)]}
    assert EntityLinker(FakeClient(hits)).link("report") is None


def test_resonance_with_context_terms():
    hits = {"drug": [SearchHit("Q1", "Drug", "a drug")]}
    entities = {"Q1": instance_of("Q100"), "Q100": {"labels": {"en": {"value": "regulated substance"}}}}
    linker = EntityLinker(FakeClient(hits, entities))
    plain = linker.link("drug")
    resonant = linker.link("drug", LinkContext(ChunkType.NP, frozenset({"substance"})))
    assert plain.confidence == 14
    assert resonant.confidence == 29


def test_semantic_type_adjustment():
    settings = LinkerSettings()
    action_type = sorted(settings.action_types)[0]
    object_type = sorted(settings.object_types)[0]
    linker = EntityLinker(FakeClient({}), settings=settings)
    assert linker.type_adjustment(frozenset({action_type}), ChunkType.NP) == -20
    assert linker.type_adjustment(frozenset({object_type}), ChunkType.NP) == 10
    assert linker.type_adjustment(frozenset({action_type}), ChunkType.VP) == 10
    assert linker.type_adjustment(frozenset({object_type}), ChunkType.VP) == -20
    assert linker.type_adjustment(frozenset(), ChunkType.VP) == 0


def test_action_type_candidate_is_penalised_for_noun_phrases():
    settings = LinkerSettings()
    action_type = sorted(settings.action_types)[0]
    object_type = sorted(settings.object_types)[0]
    hits = {"run": [SearchHit("Q1", "Run", None), SearchHit("Q2", "Run", None)]}
    entities = {"Q1": instance_of(action_type), "Q2": instance_of(object_type)}
    linker = EntityLinker(FakeClient(hits, entities), settings=settings)
    assert linker.link("run", LinkContext(ChunkType.NP)).iri.endswith("Q2")
    assert linker.link("run", LinkContext(ChunkType.VP)).iri.endswith("Q1")


def test_failed_candidate_does_not_suppress_others():
    hits = {"report": [SearchHit("Q1", "Report", "a report"), SearchHit("Q2", "Report", "a report")]}
    client = FakeClient(hits, failing_ids={"Q1"})
    linked = EntityLinker(client).link("report")
    assert linked is not None
    assert linked.iri.endswith("Q2")


def test_failed_search_term_is_skipped():
    hits = {"report": [SearchHit("Q1", "Report", "a report")]}
    client = FakeClient(hits, failing_terms={"reports"})
    linked = EntityLinker(client).link("reports")
    assert linked is not None and linked.iri.endswith("Q1")
    assert client.searched == ["reports", "report"]


def test_candidates_are_deduplicated_and_capped():
    many = [SearchHit(f"Q{i}", "report", None) for i in range(10)]
    hits = {"quarterly report": many[:3], "report": many}
    linker = EntityLinker(FakeClient(hits), settings=LinkerSettings(max_candidates=5))
    assert [h.id for h in linker.candidates("quarterly report")] == ["Q0", "Q1", "Q2", "Q3", "Q4"]


def test_empty_phrase_and_no_candidates():
    linker = EntityLinker(FakeClient({}))
    assert linker.link("") is None
    assert linker.link("   ") is None
    assert linker.link("nothing") is None


def test_claim_targets_skips_malformed_claims():
    entity = {"claims": {"P31": [{"mainsnak": {}}, {"mainsnak": {"datavalue": {"value": {"id": "Q5"}}}}]}}
    assert claim_targets(entity, ["P31", "P279"]) == ["Q5"]
    assert claim_targets(None, ["P31"]) == []


def test_unexpected_scoring_error_only_drops_that_candidate():
    hits = {"report": [SearchHit("Q1", "Report", "a report"), SearchHit("Q2", "Report", "a report")]}
    linked = EntityLinker(FakeClient(hits, broken_ids={"Q1"})).link("report")
    assert linked is not None
    assert linked.iri.endswith("Q2")


def test_unexpected_search_error_yields_no_candidates():
    class BrokenSearch(FakeClient):
        def search(self, term):
            raise RuntimeError("connection reset")

    linker = EntityLinker(BrokenSearch({}))
    assert linker.candidates("report") == []
    assert linker.link("report") is None
