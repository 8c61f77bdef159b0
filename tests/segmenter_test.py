import pytest

from thread_splitter.segmenter import (
    MAX_SEGMENT_LENGTH,
    apply_numbering,
    check_max_length,
    estimate_count,
    is_valid_length,
    normalize,
    numbering_of,
    pack,
    split_into_threads,
    split_paragraphs,
    split_sentences,
)


def test_normalize_trims_and_converts_crlf():
    assert normalize("  one\r\ntwo \r\n ") == "one\ntwo"


def test_split_paragraphs_on_blank_lines():
    assert split_paragraphs("a\n\nb\n \n\nc") == ["a", "b", "c"]


def test_split_paragraphs_keeps_single_newlines():
    assert split_paragraphs("line one\nline two") == ["line one\nline two"]


def test_split_paragraphs_empty():
    assert split_paragraphs("") == []


def test_split_sentences_keeps_terminal_punctuation():
    assert split_sentences("Hello world. How are you? Fine!") == [
        "Hello world.",
        "How are you?",
        "Fine!",
    ]


def test_split_sentences_is_a_plain_heuristic():
    # Abbreviations break, decimals without trailing whitespace do not.
    assert split_sentences("Dr. Smith paid 3.5 dollars.") == [
        "Dr.",
        "Smith paid 3.5 dollars.",
    ]


def test_split_sentences_without_punctuation():
    assert split_sentences("no terminal punctuation here") == [
        "no terminal punctuation here"
    ]


def test_empty_input_yields_no_segments():
    assert split_into_threads("") == []
    assert split_into_threads("   \n\n  \r\n") == []


def test_short_text_is_single_unnumbered_segment():
    assert split_into_threads("Short text.") == ["Short text."]


def test_paragraphs_share_a_segment_when_they_fit():
    text = "First paragraph here.\r\n\r\nSecond one."
    assert split_into_threads(text) == ["First paragraph here.\n\n Second one."]


def test_pack_joins_sentences_and_paragraph_breaks():
    assert pack([["a.", "b."], ["c."]]) == ["a. b.\n\n c."]


def test_sentences_overflowing_start_new_segment(sentence):
    s = sentence(100)
    assert split_into_threads(f"{s} {s} {s}") == [f"1/2 {s} {s}", f"2/2 {s}"]


def test_sentence_of_exactly_max_length_is_not_fragmented(sentence):
    s = sentence(MAX_SEGMENT_LENGTH)
    assert split_into_threads(s) == [s]


def test_paragraph_break_is_followed_by_a_space():
    assert pack([["A."], ["B."]]) == ["A.\n\n B."]


def test_space_after_paragraph_break_counts_toward_limit(sentence):
    first = sentence(100, "a")
    second = sentence(178, "b")
    # 100 + 2 + 1 + 178 is one past the limit.
    assert pack([[first], [second]]) == [first, second]


def test_full_paragraph_is_flushed_before_next(sentence):
    first = sentence(279, "b")
    second = sentence(50, "c")
    result = split_into_threads(f"{first}\n\n{second}")
    # "1/2 " would push the first segment past the limit.
    assert result == [first, f"2/2 {second}"]


def test_oversized_sentence_is_isolated(long_words):
    result = pack([["Intro.", long_words, "Outro."]])
    assert result[0] == "Intro."
    assert result[-1] == "Outro."
    assert result[1].endswith("...")
    assert result[2].startswith("...")
    assert len(result) == 4


def test_numbering_disabled(sentence):
    s = sentence(200)
    assert split_into_threads(f"{s} {s}", numbering=False) == [s, s]


def test_custom_max_length(sentence):
    s = sentence(30)
    result = split_into_threads(f"{s} {s} {s}", max_length=70, numbering=False)
    assert result == [f"{s} {s}", s]


def test_max_length_below_minimum_is_rejected():
    with pytest.raises(ValueError, match="at least"):
        split_into_threads("Anything.", max_length=10)
    with pytest.raises(ValueError):
        check_max_length(0)


def test_apply_numbering_prefixes_every_segment():
    assert apply_numbering(["a", "b", "c"]) == ["1/3 a", "2/3 b", "3/3 c"]


def test_apply_numbering_single_segment_untouched():
    assert apply_numbering(["only"]) == ["only"]


def test_apply_numbering_skips_prefix_that_would_overflow():
    assert apply_numbering(["x" * 13, "y"], max_length=16) == ["x" * 13, "2/2 y"]


def test_numbering_helpers():
    assert numbering_of("3/12 text") == (3, 12)
    assert numbering_of("text") is None
    assert numbering_of("text 1/2 ") is None


def test_overflowing_segment_that_looks_numbered_is_kept_whole():
    recipe = "3/4 cups " + "f" * 270 + "."
    assert apply_numbering([recipe, "Bake."]) == [recipe, "2/2 Bake."]


def test_estimate_count():
    assert estimate_count("") == 0
    assert estimate_count("a" * 224) == 1
    assert estimate_count("a" * 225) == 2


@pytest.mark.parametrize(
    ("length", "expected"),
    [(0, True), (279, True), (280, True), (281, False)],
)
def test_is_valid_length_boundary(length, expected):
    assert is_valid_length("a" * length) is expected
