import pytest
import requests

from concretize.errors import ExternalLookupError
from concretize.ontology.clients import MAX_IDS_PER_REQUEST, WikidataClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, responder):
        self.responder = responder
        self.calls = []

    def get(self, url, params=None, timeout=None, headers=None):
        self.calls.append(dict(params or {}))
        return self.responder(params or {})


def test_search_parses_hits_and_caches_per_term():
    session = FakeSession(
        lambda params: FakeResponse(
            {
                "search": [
                    {"id": "Q1", "label": "report", "description": "document", "concepturi": "u"},
                    {"label": "no id"},
                ]
            }
        )
    )
    client = WikidataClient(session)
    hits = client.search("report")
    assert [h.id for h in hits] == ["Q1"]
    assert hits[0].description == "document"
    assert client.search("report") == hits
    assert len(session.calls) == 1
    assert session.calls[0]["action"] == "wbsearchentities"


def test_get_entities_fetches_only_uncached_ids_in_batches():
    def responder(params):
        ids = params["ids"].split("|")
        entities = {i: {"id": i, "claims": {}} for i in ids}
        entities[ids[0]] = {"id": ids[0], "missing": ""}
        return FakeResponse({"entities": entities})

    session = FakeSession(responder)
    client = WikidataClient(session)
    ids = [f"Q{i}" for i in range(MAX_IDS_PER_REQUEST + 5)]
    found = client.get_entities(ids)
    assert len(session.calls) == 2
    assert "Q0" not in found
    assert len(found) == len(ids) - 2

    session.calls.clear()
    again = client.get_entities(["Q1", "Q2"])
    assert set(again) == {"Q1", "Q2"}
    assert session.calls == []


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({}, status_code=500),
        FakeResponse(ValueError("not json")),
        FakeResponse(["not", "a", "dict"]),
        FakeResponse({"error": {"info": "bad request"}}),
        FakeResponse({"search": "nope"}),
    ],
)
def test_bad_responses_raise_lookup_error(response):
    client = WikidataClient(FakeSession(lambda params: response))
    with pytest.raises(ExternalLookupError) as excinfo:
        client.search("x")
    assert excinfo.value.operation == "search"


def test_network_failure_raises_lookup_error():
    def responder(params):
        raise requests.ConnectionError("boom")

    client = WikidataClient(FakeSession(responder))
    with pytest.raises(ExternalLookupError):
        client.get_entities(["Q1"])


def test_entity_iri():
    assert WikidataClient(FakeSession(lambda p: None)).entity_iri("Q42") == (
        "http://www.wikidata.org/entity/Q42"
    )


def test_search_hits_drop_non_string_labels_and_descriptions():
    session = FakeSession(
        lambda params: FakeResponse(
            {
                "search": [
                    {"id": "Q1", "label": {"en": "report"}, "description": {"en": "document"}},
                    {"id": "Q2", "label": "report", "description": 7, "concepturi": ["u"]},
                ]
            }
        )
    )
    hits = WikidataClient(session).search("report")
    assert [(h.label, h.description, h.concept_uri) for h in hits] == [("", None, None), ("report", None, None)]
