"""Shared line-level utilities used by all folder parsers.

  1. slugify()        — title text → URL-safe identifier
  2. classify_line()  — BLANK / COMMENT / NUMBER / TITLE / PART / HEADER / BODY
  3. parse_header()   — (field, value) from a header line
  4. extract_tags()   — ``G:`` grouping tags from assembled abc text
  5. TagCollector     — insertion-ordered, de-duplicated tag list
"""

import re
import unicodedata
from collections.abc import Iterable
from enum import Enum, auto

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# Tune numbering marker: X:1, X: 12
NUMBER_RE = re.compile(r"^X:\s*(\d+)")

# Title line: T:Jigs 1 - Some jigs
TITLE_RE = re.compile(r"^T:(.*)$")

# Part marker inside a body: P:A, P: B
PART_RE = re.compile(r"^P:")

# Information field: one ASCII letter, a colon, then the value.
# A colon followed by "|" or ":" is a note plus a repeat sign (G:|, A::),
# i.e. a line of music rather than a field.
HEADER_RE = re.compile(r"^([A-Za-z]):(?![|:])(.*)$")

# Set note embedded as a typesetting directive: %%text Play twice
TEXT_NOTE_RE = re.compile(r"^%%text\s+(.*)$")

_GROUPING_FIELD = "G"


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    """Convert *text* to an ASCII, hyphen-joined identifier.

    Case is preserved; accents are folded to their ASCII base letter and
    every other run of non-alphanumeric characters becomes one hyphen.
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^A-Za-z0-9]+", "-", text)
    return text.strip("-")


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


class LineType(Enum):
    BLANK = auto()  # empty or whitespace only
    COMMENT = auto()  # % comment or %% directive
    NUMBER = auto()  # X:1 — starts a numbering context
    TITLE = auto()  # T:<text>
    PART = auto()  # P:<marker> — always discarded
    HEADER = auto()  # any other information field
    BODY = auto()  # notation content


def classify_line(line: str) -> LineType:
    """Classify a single line of a multi-tune document."""
    stripped = line.strip()
    if not stripped:
        return LineType.BLANK
    if stripped.startswith("%"):
        return LineType.COMMENT
    if NUMBER_RE.match(stripped):
        return LineType.NUMBER
    title = TITLE_RE.match(stripped)
    if title:
        # An empty title names nothing
        return LineType.TITLE if title.group(1).strip() else LineType.BLANK
    if PART_RE.match(stripped):
        return LineType.PART
    if HEADER_RE.match(stripped):
        return LineType.HEADER
    return LineType.BODY


def parse_header(line: str) -> tuple[str, str] | None:
    """Return ``(field, value)`` for a header line, or ``None``.

    The value is trimmed; the field letter is case-sensitive.
    """
    m = HEADER_RE.match(line.strip())
    if not m:
        return None
    return m.group(1), m.group(2).strip()


def parse_title(line: str) -> str:
    """Return the trimmed text of a TITLE line."""
    m = TITLE_RE.match(line.strip())
    return m.group(1).strip() if m else ""


def parse_text_note(line: str) -> str | None:
    """Return the note from a ``%%text`` line, or ``None``."""
    m = TEXT_NOTE_RE.match(line.strip())
    if not m:
        return None
    return m.group(1).strip() or None


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def extract_tags(abc: str) -> list[str]:
    """Return the grouping tags found in *abc*, first-seen order, no repeats.

    Each ``G:`` line is one literal tag: commas and slashes are kept, so
    ``G:Show set, slow/fast`` is the single tag ``"Show set, slow/fast"``.
    """
    collector = TagCollector()
    for line in abc.splitlines():
        header = parse_header(line)
        if header and header[0] == _GROUPING_FIELD and header[1]:
            collector.add(header[1])
    return collector.tags


class TagCollector:
    """An insertion-ordered list of tags backed by a membership set."""

    def __init__(self, tags: Iterable[str] = ()):
        self.tags: list[str] = []
        self._seen: set[str] = set()
        self.extend(tags)

    def add(self, tag: str) -> None:
        if tag not in self._seen:
            self._seen.add(tag)
            self.tags.append(tag)

    def extend(self, tags: Iterable[str]) -> None:
        for tag in tags:
            self.add(tag)

    def __contains__(self, tag: str) -> bool:
        return tag in self._seen

    def __len__(self) -> int:
        return len(self.tags)


def parse_number(line: str) -> str:
    """Return the digits of a NUMBER line (``X:12`` → ``"12"``)."""
    m = NUMBER_RE.match(line.strip())
    return m.group(1) if m else ""
