from concretize.text.tokenize import normalize, tokenize


def texts(sentence):
    return [t.text for t in tokenize(sentence)]


def test_words_and_punctuation():
    assert texts("The team wrote the report.") == ["The", "team", "wrote", "the", "report", "."]


def test_numbers_keep_separators():
    assert texts("It costs 3.14 or 1,000 dollars") == ["It", "costs", "3.14", "or", "1,000", "dollars"]


def test_ellipsis_variants():
    assert texts("Wait... then…") == ["Wait", "...", "then", "…"]


def test_apostrophes_are_folded_and_contractions_kept_whole():
    assert texts("They didn’t go") == ["They", "didn't", "go"]
    assert texts("the team's plan") == ["the", "team's", "plan"]


def test_hyphenated_words_stay_together():
    assert texts("a well-known fact") == ["a", "well-known", "fact"]


def test_offsets_point_into_normalized_text():
    sentence = "The   report\tis  ready"
    normalized = normalize(sentence)
    assert normalized == "The report is ready"
    for token in tokenize(sentence):
        assert normalized[token.start : token.start + len(token.text)] == token.text


def test_empty_input():
    assert tokenize("") == []
    assert tokenize("   ") == []
