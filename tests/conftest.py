from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from concretize.graph.parser import DependencyParser
from concretize.nlp.chunker import chunk
from concretize.nlp.tagger import POSTagger, QuoteState

settings.register_profile(
    "ci",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("ci")


@pytest.fixture
def tagger() -> POSTagger:
    return POSTagger()


@pytest.fixture
def parse(tagger):
    """Tag, chunk and parse a sentence into a set of (head, relation, dependent)."""

    parser = DependencyParser()

    def _parse(sentence: str):
        chunks = chunk(tagger.tag(sentence, QuoteState()))
        return {(e.head, e.relation, e.dependent) for e in parser.parse(chunks)}

    return _parse
