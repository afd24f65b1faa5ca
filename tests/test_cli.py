import json
from unittest.mock import patch

from click.testing import CliRunner

from tunefolder.cli import _default_filename, main
from tunefolder.exceptions import UnsupportedSourceError

BOOK = "X:1\nT:Jigs 1 - Som jigs\nG:Show set\nT:A tune\nabcdef\nX:2\nT:Reels 1 - Fast\nT:B tune\ndef\n"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_book(tmp_path, text=BOOK, name="trip-hazard.abc"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def _invoke(*args):
    return CliRunner().invoke(main, [str(a) for a in args])


# ---------------------------------------------------------------------------
# _default_filename
# ---------------------------------------------------------------------------


def test_default_filename():
    assert _default_filename("Trip Hazard") == "trip-hazard.json"


def test_default_filename_without_letters():
    assert _default_filename("!!!") == "folder.json"


# ---------------------------------------------------------------------------
# --help
# ---------------------------------------------------------------------------


def test_help_output():
    result = _invoke("--help")
    assert result.exit_code == 0
    assert "Build a tune folder" in result.output
    assert "--per-tune-fields" in result.output


# ---------------------------------------------------------------------------
# --stdout
# ---------------------------------------------------------------------------


def test_stdout_prints_linked_json(tmp_path):
    result = _invoke("--stdout", _write_book(tmp_path))
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["name"] == "Trip Hazard"
    jigs = data["content"][0]["content"][0]
    assert jigs["tags"] == ["Show set"]
    assert data["content"][1]["content"][0]["tags"] == []
    assert jigs["nextSlug"] == "Reels-1-Fast"
    assert jigs["previousSlug"] == "Reels-1-Fast"


def test_name_option(tmp_path):
    result = _invoke("--stdout", "--name", "Session Book", _write_book(tmp_path))
    assert json.loads(result.output)["name"] == "Session Book"


def test_no_links_flag(tmp_path):
    result = _invoke("--stdout", "--no-links", _write_book(tmp_path))
    jigs = json.loads(result.output)["content"][0]["content"][0]
    assert "nextSlug" not in jigs


def test_per_tune_fields_option(tmp_path):
    text = "X:1\nT:Jigs 1 - A\nT:One\nK:G\nabc\nT:Two\ndef\n"
    result = _invoke("--stdout", "--per-tune-fields", "K, W", _write_book(tmp_path, text))
    assert result.exit_code == 0
    tunes = json.loads(result.output)["content"][0]["content"][0]["content"]
    assert "K:G" not in tunes[1]["abc"]


def test_per_tune_fields_rejects_words(tmp_path):
    result = _invoke("--stdout", "--per-tune-fields", "WW", _write_book(tmp_path))
    assert result.exit_code != 0
    assert "single field letter" in result.output


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------


def test_output_file_written_with_flag(tmp_path):
    out_file = tmp_path / "folder.json"
    result = _invoke("-o", out_file, _write_book(tmp_path))
    assert result.exit_code == 0
    assert json.loads(out_file.read_text(encoding="utf-8"))["name"] == "Trip Hazard"


def test_default_output_derived_from_name(tmp_path):
    source = _write_book(tmp_path)
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, [str(source)])
    assert result.exit_code == 0
    assert "trip-hazard.json" in result.output


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


def test_missing_source_exits_nonzero(tmp_path):
    result = _invoke("--stdout", tmp_path / "nope.abc")
    assert result.exit_code != 0


def test_unsupported_source_exits_nonzero(tmp_path):
    source = _write_book(tmp_path, name="book.txt")
    result = _invoke("--stdout", source)
    assert result.exit_code == 1
    assert "Error" in result.output
    assert "Supported sources" in result.output


def test_unsupported_source_from_registry(tmp_path):
    source = _write_book(tmp_path)
    with patch("tunefolder.cli.get_parser", side_effect=UnsupportedSourceError(str(source))):
        result = _invoke("--stdout", source)
    assert result.exit_code == 1


def test_parse_error_reports_line(tmp_path):
    source = _write_book(tmp_path, "X:1\nT:Jigs 1 - A\nC:Trad (Missing Tune)\nT:One\nabc\n")
    result = _invoke("--stdout", source)
    assert result.exit_code == 1
    assert "Line 3" in result.output
    assert "Missing Tune" in result.output


def test_unreadable_tune_file_exits_nonzero(tmp_path):
    source = _write_book(tmp_path, "\\section{Jigs}\n\\subsection{Jigs 1}\n\\abcinput{gone}\n", "book.tex")
    result = _invoke("--stdout", source)
    assert result.exit_code == 1
    assert "gone.abc" in result.output
