"""Header inheritance across tune boundaries.

A multi-tune document states most information fields once and lets them
carry over: ``M:6/8`` under a set title applies to every tune below it until
another ``M:`` replaces it.  :class:`HeaderState` keeps two maps:

``inherited``
    Long-lived ``field → value`` map.  Survives tune boundaries and numbering
    markers.
``tune``
    Fields written in the header block of the tune currently being opened.
    Folded into ``inherited`` when the tune's header block is committed.

Per-tune-only fields (lyrics by default) go into ``tune`` but never into
``inherited``.

Set-scoped fields (the ``G:`` grouping tag) inherit within a set and are
dropped at the next numbering marker.
"""

from collections.abc import Iterable

from .utils import parse_header

DEFAULT_PER_TUNE_FIELDS = ("W", "w")

# Fields that come first in an assembled header block, after X and T.
_LEADING_FIELDS = ("C", "M", "L", "K")

# Supplied by the numbering marker and title lines, never by a header line.
_RESERVED_FIELDS = frozenset({"X", "T"})

# Describe one set only; forgotten at the next numbering marker.
SET_SCOPED_FIELDS = frozenset({"G"})


class HeaderState:
    """Running header maps for one parse."""

    def __init__(self, per_tune_fields: Iterable[str] = DEFAULT_PER_TUNE_FIELDS):
        self.per_tune_fields = frozenset(per_tune_fields)
        self.inherited: dict[str, str] = {}
        self.tune: dict[str, str] = {}

    def is_per_tune(self, field: str) -> bool:
        return field in self.per_tune_fields

    def inherit(self, field: str, value: str) -> bool:
        """Update the inherited map.  Returns False for fields that never inherit."""
        if field in _RESERVED_FIELDS or self.is_per_tune(field):
            return False
        self.inherited[field] = value
        return True

    def record(self, field: str, value: str) -> None:
        """Record a field from the open tune's header block."""
        if field in _RESERVED_FIELDS:
            return
        self.tune[field] = value

    def commit(self) -> dict[str, str]:
        """Close the open tune's header block.

        Returns the tune's effective fields (inherited, overridden by its own)
        and carries its inheritable fields forward to later tunes.
        """
        fields = dict(self.inherited)
        fields.update(self.tune)
        for field, value in self.tune.items():
            self.inherit(field, value)
        self.tune = {}
        return fields

    def end_set(self) -> None:
        """Forget set-scoped fields such as the G: grouping tag."""
        for field in SET_SCOPED_FIELDS:
            self.inherited.pop(field, None)

    def is_inheritable_line(self, line: str) -> bool:
        """True if *line* is a header line whose field inherits."""
        header = parse_header(line)
        if header is None:
            return False
        field = header[0]
        return field not in _RESERVED_FIELDS and not self.is_per_tune(field)


def render_headers(number: str, title: str, fields: dict[str, str]) -> list[str]:
    """Return header lines ordered X, T, C, M, L, K, then the rest as encountered."""
    lines = [f"X:{number}", f"T:{title}"]
    for field in _LEADING_FIELDS:
        if field in fields:
            lines.append(f"{field}:{fields[field]}")
    for field, value in fields.items():
        if field not in _LEADING_FIELDS:
            lines.append(f"{field}:{value}")
    return lines


def strip_trailing_headers(body: list[str], state: HeaderState) -> list[str]:
    """Drop inheritable header lines from the end of *body*.

    They have already been copied into ``state.inherited`` and describe the
    next tune, not this one.  Comment lines among them are kept, and the walk
    back continues past them.  Per-tune-only lines stay and end the walk.
    """
    start = len(body)
    while start and (
        body[start - 1].startswith("%") or state.is_inheritable_line(body[start - 1])
    ):
        start -= 1
    tail = [line for line in body[start:] if not state.is_inheritable_line(line)]
    return body[:start] + tail
