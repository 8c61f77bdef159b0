from thread_splitter.segmenter import fragment_sentence, split_into_threads


def test_repeated_word_sentence_splits_at_last_fitting_space(long_words):
    fragments = fragment_sentence(long_words)
    assert [len(f) for f in fragments] == [277, 127]
    assert fragments[0] == " ".join(["word"] * 55) + "..."
    assert fragments[1] == "..." + " ".join(["word"] * 25)


def test_fragments_stay_within_limit_and_link_with_ellipses(long_words):
    text = " ".join([long_words] * 3)
    fragments = fragment_sentence(text)
    assert all(len(f) <= 280 for f in fragments)
    assert all(f.endswith("...") for f in fragments[:-1])
    assert all(f.startswith("...") for f in fragments[1:])
    assert not fragments[-1].endswith("...")


def test_hard_cut_without_whitespace():
    fragments = fragment_sentence("x" * 600)
    assert fragments == [
        "x" * 277 + "...",
        "..." + "x" * 274 + "...",
        "..." + "x" * 49,
    ]


def test_colon_and_semicolon_preferred_over_comma():
    text = "x" * 100 + "; " + "y" * 100 + ", " + "z" * 150 + "."
    assert fragment_sentence(text) == [
        "x" * 100 + ";...",
        "..." + "y" * 100 + ", " + "z" * 150 + ".",
    ]


def test_comma_preferred_over_plain_whitespace():
    text = "p " * 50 + "q" * 50 + ", " + "r " * 100 + "s."
    fragments = fragment_sentence(text)
    assert fragments[0].endswith(",...")


def test_cut_before_conjunction():
    text = "a" * 150 + " because " + "b" * 150
    assert fragment_sentence(text) == [
        "a" * 150 + "...",
        "...because " + "b" * 150,
    ]


def test_conjunction_match_ignores_case():
    text = "a" * 150 + " Because " + "b" * 150
    assert fragment_sentence(text)[1].startswith("...Because")


def test_short_sentence_is_returned_whole():
    assert fragment_sentence("Fits easily.") == ["Fits easily."]


def test_first_fragment_too_long_for_numbering_keeps_content(long_words):
    result = split_into_threads(long_words)
    assert result[0] == " ".join(["word"] * 55) + "..."
    assert result[1] == "2/2 ..." + " ".join(["word"] * 25)
