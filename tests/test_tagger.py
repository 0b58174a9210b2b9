import pytest
from hypothesis import given
from hypothesis import strategies as st

from concretize.nlp.lexicon import Lexicon
from concretize.nlp.tagger import POSTagger, QuoteState, expand_contractions
from concretize.nlp.taxonomy import CLOSE_QUOTE, OPEN_QUOTE
from concretize.text.tokenize import tokenize


def tags(tagger, sentence, state=None):
    return [(t.word, t.tag) for t in tagger.tag(sentence, state or QuoteState())]


def tag_of(tagger, sentence, word):
    return dict(tags(tagger, sentence))[word]


def test_passive_sentence(tagger):
    assert tags(tagger, "The report was written by the team.") == [
        ("The", "DT"),
        ("report", "NN"),
        ("was", "VBD"),
        ("written", "VBN"),
        ("by", "IN"),
        ("the", "DT"),
        ("team", "NN"),
        (".", "."),
    ]


def test_active_sentence_keeps_object_a_noun(tagger):
    assert tags(tagger, "The team wrote the report") == [
        ("The", "DT"),
        ("team", "NN"),
        ("wrote", "VBD"),
        ("the", "DT"),
        ("report", "NN"),
    ]


def test_question_inversion_gives_base_verb(tagger):
    assert tag_of(tagger, "Did they approve the plan?", "approve") == "VB"
    assert tag_of(tagger, "They approve the plan.", "approve") == "VBP"


def test_modal_and_to_infinitive(tagger):
    tagged = tags(tagger, "The team can approve the plan.")
    assert ("can", "MD") in tagged
    assert ("approve", "VB") in tagged
    tagged = tags(tagger, "The team wants to approve the plan.")
    assert ("to", "TO") in tagged
    assert ("approve", "VB") in tagged


@pytest.mark.parametrize(
    "sentence",
    ["The team did not approve the plan.", "The team didn't approve the plan."],
)
def test_do_support_reads_through_negation(tagger, sentence):
    assert tag_of(tagger, sentence, "approve") == "VB"


def test_contractions_expand_with_fixed_tags(tagger):
    assert tags(tagger, "didn't")[:2] == [("did", "VBD"), ("not", "RB")]
    assert tags(tagger, "They're here")[:2] == [("They", "PRP"), ("are", "VBP")]
    assert expand_contractions(["Can't"]) == [("Ca", "MD"), ("not", "RB")]
    assert expand_contractions(["plan"]) == [("plan", None)]


def test_possessive_and_punctuation(tagger):
    tagged = tags(tagger, "The team's report (draft); done... ok!")
    assert ("team's", "POS") in tagged
    assert ("(", "PRN") in tagged and (")", "PRN") in tagged
    assert (";", ":") in tagged
    assert ("...", "ELL") in tagged
    assert ("!", ".") in tagged


def test_there_and_copula(tagger):
    assert tag_of(tagger, "There is a problem.", "There") == "EX"
    assert tag_of(tagger, "The report is approved.", "approved") == "VBN"
    assert tag_of(tagger, "Running is fun.", "Running") == "VBG"
    assert tag_of(tagger, "Running is fun.", "fun") == "JJ"


def test_unknown_words_use_suffixes_then_capitalisation(tagger):
    assert tagger.suffix_tags("florbing") == ("VBG", "NN")
    assert tagger.suffix_tags("glorbed") == ("VBD", "VBN")
    assert tagger.suffix_tags("blorpily") == ("RB",)
    assert tagger.suffix_tags("zorbles") == ("NNS", "VBZ")
    assert tagger.suffix_tags("frobnicable") == ("JJ",)
    assert tagger.suffix_tags("frobnicize") == ("VB",)
    assert tagger.suffix_tags("3.14") == ("CD",)
    assert tagger.suffix_tags("report") == ()
    assert tag_of(tagger, "We visited Zorbania.", "Zorbania") == "NNP"
    assert tag_of(tagger, "Zorbania is big.", "Zorbania") == "NN"
    assert tag_of(tagger, "Wow!", "Wow") == "UH"


def test_quote_toggles_alternate_within_sentence(tagger):
    tagged = tagger.tag('He said "yes" and "no".', QuoteState())
    quotes = [t.tag for t in tagged if t.word == '"']
    assert quotes == [OPEN_QUOTE, CLOSE_QUOTE, OPEN_QUOTE, CLOSE_QUOTE]


def test_quote_state_carries_across_sentences(tagger):
    state = QuoteState()
    first = tagger.tag('She said "hi', state)
    second = tagger.tag('bye" he said', state)
    assert first[2].tag == OPEN_QUOTE
    assert second[1].tag == CLOSE_QUOTE
    # A fresh state opens again.
    assert tagger.tag('bye" he said', QuoteState())[1].tag == OPEN_QUOTE


def test_tagger_default_state_persists_until_reset():
    tagger = POSTagger()
    assert tagger.tag('"')[0].tag == OPEN_QUOTE
    assert tagger.tag('"')[0].tag == CLOSE_QUOTE
    tagger.reset_quotes()
    assert tagger.tag('"')[0].tag == OPEN_QUOTE


def test_trace_reports_rule_names(tagger):
    decisions = tagger.trace("The report was written by the team.", QuoteState())
    sources = {d.word: d.source for d in decisions}
    assert sources["written"] == "after-copula"
    assert sources["."] == "literal"
    assert sources["The"] == "fallback"


def test_custom_lexicon_order_drives_fallback():
    tagger = POSTagger(Lexicon({"zap": ["VB", "NN"]}))
    assert tagger.tag("zap", QuoteState())[0].tag == "VB"


_WORDS = st.sampled_from(
    ["the", "report", "team", "wrote", "is", "not", "n't", "quickly", "Zorbania", "to", "approve",
     "her", "that", "which", "there", ",", ".", "!", '"', "'", "...", "can", "blorped", "3.5"]
)


@given(st.lists(_WORDS, max_size=15))
def test_every_token_gets_exactly_one_tag(words):
    tagger = POSTagger()
    sentence = " ".join(words)
    expected = [t for t in tokenize(sentence)]
    tagged = tagger.tag(sentence, QuoteState())
    assert len(tagged) == len(expected)
    assert all(t.tag for t in tagged)


@given(st.lists(_WORDS, max_size=15))
def test_tagging_is_deterministic_for_equal_states(words):
    tagger = POSTagger()
    sentence = " ".join(words)
    first_state, second_state = QuoteState(), QuoteState()
    assert tagger.tag(sentence, first_state) == tagger.tag(sentence, second_state)
    assert first_state == second_state
