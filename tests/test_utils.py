from tunefolder.parsers.utils import (
    LineType,
    TagCollector,
    classify_line,
    extract_tags,
    parse_header,
    parse_number,
    parse_text_note,
    parse_title,
    slugify,
)

# ---------------------------------------------------------------------------
# slugify
# ---------------------------------------------------------------------------


def test_slugify_joins_words_with_hyphens():
    assert slugify("Jigs 1 - Som jigs") == "Jigs-1-Som-jigs"


def test_slugify_preserves_case():
    assert slugify("The Kesh") == "The-Kesh"


def test_slugify_folds_accents():
    assert slugify("Marché à Paris") == "Marche-a-Paris"


def test_slugify_drops_punctuation():
    assert slugify("Morrison's Jig!") == "Morrison-s-Jig"


def test_slugify_is_deterministic():
    assert slugify("A  tune") == slugify("A  tune") == "A-tune"


# ---------------------------------------------------------------------------
# classify_line
# ---------------------------------------------------------------------------


def test_classify_blank():
    assert classify_line("") == LineType.BLANK
    assert classify_line("   ") == LineType.BLANK


def test_classify_comment_and_directive():
    assert classify_line("% a comment") == LineType.COMMENT
    assert classify_line("%%text Play twice") == LineType.COMMENT


def test_classify_number():
    assert classify_line("X:1") == LineType.NUMBER
    assert classify_line("X: 12") == LineType.NUMBER


def test_classify_title():
    assert classify_line("T:The Kesh") == LineType.TITLE


def test_classify_empty_title_is_blank():
    assert classify_line("T:   ") == LineType.BLANK


def test_classify_part():
    assert classify_line("P:A") == LineType.PART
    assert classify_line("P: B") == LineType.PART


def test_classify_headers():
    assert classify_line("K:G") == LineType.HEADER
    assert classify_line("M:6/8") == LineType.HEADER
    assert classify_line("w:some words") == LineType.HEADER
    assert classify_line("G:English") == LineType.HEADER


def test_classify_body():
    assert classify_line("|:GAG GAB|ABA ABd:|") == LineType.BODY
    assert classify_line("abcdef") == LineType.BODY


def test_classify_note_with_repeat_sign_is_body():
    # G followed by an end-repeat, not a G: field
    assert classify_line("G:|ABc def|") == LineType.BODY
    assert classify_line("A::B") == LineType.BODY


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------


def test_parse_header_trims_value():
    assert parse_header("K:  G ") == ("K", "G")


def test_parse_header_is_case_sensitive():
    assert parse_header("w:la la") == ("w", "la la")
    assert parse_header("W:la la") == ("W", "la la")


def test_parse_header_rejects_body():
    assert parse_header("abcdef") is None


def test_parse_title():
    assert parse_title("T: The Kesh ") == "The Kesh"


def test_parse_number():
    assert parse_number("X: 7") == "7"


def test_parse_text_note():
    assert parse_text_note("%%text  Play twice ") == "Play twice"
    assert parse_text_note("%%MIDI program 1") is None


# ---------------------------------------------------------------------------
# extract_tags
# ---------------------------------------------------------------------------


def test_extract_tags_single():
    assert extract_tags("X:1\nT:A tune\nG:English\nabc") == ["English"]


def test_extract_tags_none():
    assert extract_tags("X:1\nT:A tune\nabc") == []


def test_extract_tags_keeps_commas_and_slashes():
    assert extract_tags("G:Show set, slow/fast") == ["Show set, slow/fast"]


def test_extract_tags_deduplicates_in_first_seen_order():
    abc = "G:English\nG:Welsh\nabc\nG:English"
    assert extract_tags(abc) == ["English", "Welsh"]


def test_extract_tags_ignores_staff_lines():
    assert extract_tags("G:|ABc def|") == []


# ---------------------------------------------------------------------------
# TagCollector
# ---------------------------------------------------------------------------


def test_tag_collector_keeps_insertion_order():
    collector = TagCollector(["b", "a"])
    collector.extend(["c", "a", "b"])
    assert collector.tags == ["b", "a", "c"]
    assert len(collector) == 3
    assert "c" in collector


def test_tag_collector_is_exact_match():
    collector = TagCollector(["English"])
    collector.add("english")
    assert collector.tags == ["English", "english"]
