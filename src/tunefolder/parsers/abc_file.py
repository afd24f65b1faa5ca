"""Parser for multi-tune abc documents.

One long abc file holds every tune of a folder.  Structure is carried by
title conventions:

    X:1
    T:Jigs 1 - The kesh set       ← set title: first T: after X:
    M:6/8                         ← set-level header, inherited by tunes
    %%text Play each tune twice   ← set note
    T:The Kesh                    ← tune title
    K:G
    |:GAG GAB|...                 ← body
    T:Morrison's                  ← next tune in the same set
    ...
    X:2
    T:Jigs 2 - ...                ← next set, same "Jigs" section

The section name is the set title up to its number and dash (``Jigs``).
Tunes of a set share the set's numbering marker.

Parsing is one forward pass.  A :class:`_ParserState` carries everything the
pass needs; each classified line is handed to one step function which
mutates it.  Nothing is shared between calls.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from ..exceptions import (
    DuplicateSlugError,
    HeaderOrderError,
    NonContiguousSectionError,
    ParseError,
    SectionInferenceError,
)
from ..models import Folder, Section, Tune, TuneSet
from .base import FolderParser
from .composer import ComposerResolver, PendingComposer, parse_composer_reference
from .headers import DEFAULT_PER_TUNE_FIELDS, HeaderState, render_headers, strip_trailing_headers
from .utils import (
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

logger = logging.getLogger(__name__)

# "Jigs 1 - ...", "Reels 12b - ..."
_NUMBERED_SECTION_RE = re.compile(r"^(.+?) [1-9][0-9a-d]? +- ")
# "Waltzes - ..."
_SECTION_RE = re.compile(r"^(.+?) +- ")


class AbcFolderParser(FolderParser):
    """Parser for a single ``.abc`` file holding many sets."""

    def __init__(self, per_tune_fields: Iterable[str] = DEFAULT_PER_TUNE_FIELDS):
        self.per_tune_fields = tuple(per_tune_fields)

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        return path.suffix.lower() == ".abc"

    def build(self, text: str, name: str, source_dir: Path) -> Folder:
        return build_folder(name, text, per_tune_fields=self.per_tune_fields)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


@dataclass
class FolderResult:
    """Outcome of :func:`try_build_folder`: a folder or the error that stopped it."""

    folder: Folder | None = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_folder(
    name: str,
    text: str,
    per_tune_fields: Iterable[str] = DEFAULT_PER_TUNE_FIELDS,
) -> Folder:
    """Assemble a :class:`~tunefolder.models.Folder` from multi-tune abc *text*.

    Args:
        name:            Folder name.
        text:            The whole document, already decoded.
        per_tune_fields: Field letters that never carry over to the next tune.

    Raises:
        ParseError: (a subclass of) on any structural violation.
    """
    state = _ParserState(folder=Folder(name=name), headers=HeaderState(per_tune_fields))
    for line_number, line in enumerate(text.splitlines(), start=1):
        _STEPS[classify_line(line)](state, line_number, line)
    _finish_set(state)
    logger.debug(
        "Built folder %r: %d sections, %d sets",
        name,
        len(state.folder.content),
        len(state.folder.sets()),
    )
    return state.folder


def try_build_folder(
    name: str,
    text: str,
    per_tune_fields: Iterable[str] = DEFAULT_PER_TUNE_FIELDS,
) -> FolderResult:
    """Like :func:`build_folder` but returns the failure instead of raising it."""
    try:
        return FolderResult(folder=build_folder(name, text, per_tune_fields))
    except ParseError as exc:
        return FolderResult(error=exc)


def infer_section_name(title: str) -> str | None:
    """Return the section a set title belongs to, or None."""
    m = _NUMBERED_SECTION_RE.match(title) or _SECTION_RE.match(title)
    return m.group(1).strip() if m else None


# ---------------------------------------------------------------------------
# Parser state
# ---------------------------------------------------------------------------


class Mode(Enum):
    AWAITING_NUMBER = auto()  # before the first X:
    AWAITING_SET_TITLE = auto()  # after X:, before its first T:
    SET_HEADERS = auto()  # after the set title, before the first tune
    TUNE_HEADERS = auto()  # after a tune title, before its first body line
    TUNE_BODY = auto()  # inside a tune's body


@dataclass
class _OpenTune:
    """A tune being assembled, kept until its set closes."""

    title: str
    slug: str
    number: str
    fields: dict[str, str] = field(default_factory=dict)
    comments: list[str] = field(default_factory=list)  # % lines from the header block
    body: list[str] = field(default_factory=list)
    record: Tune | None = None  # set once committed to the set

    def render(self) -> str:
        lines = render_headers(self.number, self.title, self.fields)
        return "\n".join(lines + self.comments + self.body).strip()


@dataclass
class _ParserState:
    folder: Folder
    headers: HeaderState
    composers: ComposerResolver = field(default_factory=ComposerResolver)
    mode: Mode = Mode.AWAITING_NUMBER
    number: str = ""
    section: Section | None = None
    tune_set: TuneSet | None = None
    tags: TagCollector | None = None
    tune: _OpenTune | None = None
    committed: list[_OpenTune] = field(default_factory=list)  # tunes of the open set
    set_slugs: set[str] = field(default_factory=set)


# ---------------------------------------------------------------------------
# Line steps
# ---------------------------------------------------------------------------


def _on_blank(state: _ParserState, line_number: int, line: str) -> None:
    pass


def _on_comment(state: _ParserState, line_number: int, line: str) -> None:
    if state.mode == Mode.SET_HEADERS:
        note = parse_text_note(line)
        if note:
            state.tune_set.notes.append(note)
    elif state.mode == Mode.TUNE_HEADERS:
        state.tune.comments.append(line.strip())
    elif state.mode == Mode.TUNE_BODY:
        state.tune.body.append(line.strip())


def _on_number(state: _ParserState, line_number: int, line: str) -> None:
    _finish_set(state)
    state.number = parse_number(line)
    state.mode = Mode.AWAITING_SET_TITLE


def _on_title(state: _ParserState, line_number: int, line: str) -> None:
    title = parse_title(line)
    if state.mode == Mode.AWAITING_NUMBER:
        raise HeaderOrderError(line_number, line)
    if state.mode == Mode.AWAITING_SET_TITLE:
        _open_set(state, line_number, line, title)
        state.mode = Mode.SET_HEADERS
        return
    # A title inside a set always starts the next tune
    _add_tune(state)
    _open_tune(state, title)
    state.mode = Mode.TUNE_HEADERS


def _on_part(state: _ParserState, line_number: int, line: str) -> None:
    if state.mode == Mode.AWAITING_NUMBER:
        raise HeaderOrderError(line_number, line)
    logger.debug("Line %d: dropping part marker %r", line_number, line.strip())


def _on_header(state: _ParserState, line_number: int, line: str) -> None:
    if state.mode == Mode.AWAITING_NUMBER:
        raise HeaderOrderError(line_number, line)
    field_name, value = parse_header(line)

    if field_name == "C":
        reference = parse_composer_reference(value, line_number, line)
        if reference:
            _queue_composer(state, reference)
            return

    if state.mode in (Mode.AWAITING_SET_TITLE, Mode.SET_HEADERS):
        if not state.headers.inherit(field_name, value):
            logger.debug("Line %d: no tune open, dropping %r", line_number, line.strip())
    elif state.mode == Mode.TUNE_HEADERS:
        state.headers.record(field_name, value)
    else:
        state.tune.body.append(line.strip())
        state.headers.inherit(field_name, value)


def _on_body(state: _ParserState, line_number: int, line: str) -> None:
    if state.mode in (Mode.AWAITING_NUMBER, Mode.AWAITING_SET_TITLE):
        logger.debug("Line %d: ignoring text outside a tune", line_number)
        return
    if state.mode == Mode.SET_HEADERS:
        # Music straight after the set title: the set is a single tune
        _open_tune(state, state.tune_set.name)
    if state.mode != Mode.TUNE_BODY:
        state.tune.fields = state.headers.commit()
        state.mode = Mode.TUNE_BODY
    state.tune.body.append(line.rstrip())


_STEPS = {
    LineType.BLANK: _on_blank,
    LineType.COMMENT: _on_comment,
    LineType.NUMBER: _on_number,
    LineType.TITLE: _on_title,
    LineType.PART: _on_part,
    LineType.HEADER: _on_header,
    LineType.BODY: _on_body,
}


# ---------------------------------------------------------------------------
# Sets and sections
# ---------------------------------------------------------------------------


def _open_set(state: _ParserState, line_number: int, line: str, title: str) -> None:
    section_name = infer_section_name(title)
    if not section_name:
        raise SectionInferenceError(line_number, line, title)

    if state.section is None or state.section.name != section_name:
        if any(section.name == section_name for section in state.folder.content):
            current = state.section.name if state.section else None
            raise NonContiguousSectionError(line_number, line, section_name, current)
        state.section = Section(name=section_name)
        state.folder.content.append(state.section)
        logger.debug("Line %d: opened section %r", line_number, section_name)

    slug = slugify(title)
    if slug in state.set_slugs:
        raise DuplicateSlugError(line_number, line, slug)
    state.set_slugs.add(slug)

    state.tags = TagCollector()
    state.tune_set = TuneSet(name=title, slug=slug, tags=state.tags.tags)
    state.section.content.append(state.tune_set)
    logger.debug("Line %d: opened set %r", line_number, title)


def _finish_set(state: _ParserState) -> None:
    """Close the open tune and the set it belongs to."""
    _add_tune(state)
    state.composers.check_resolved(state.tune_set.name if state.tune_set else None)
    state.headers.end_set()
    state.committed = []


# ---------------------------------------------------------------------------
# Tunes
# ---------------------------------------------------------------------------


def _open_tune(state: _ParserState, title: str) -> None:
    state.tune = _OpenTune(title=title, slug=slugify(title), number=state.number)


def _add_tune(state: _ParserState) -> None:
    """Commit the open tune, if any, to the open set."""
    tune = state.tune
    if tune is None:
        return
    if state.mode == Mode.TUNE_HEADERS:
        # Title and headers only, no body
        tune.fields = state.headers.commit()
    tune.body = strip_trailing_headers(tune.body, state.headers)

    composer = state.composers.resolve(tune.slug)
    if composer:
        tune.fields["C"] = composer

    tune.record = Tune(filename="", slug=tune.slug, abc=tune.render())
    state.tune_set.content.append(tune.record)
    state.tags.extend(extract_tags(tune.record.abc))
    state.committed.append(tune)
    state.tune = None
    logger.debug("Added tune %r to set %r", tune.title, state.tune_set.name)


def _queue_composer(state: _ParserState, reference: PendingComposer) -> None:
    # The named tune may already be behind us in this set
    for tune in state.committed:
        if tune.slug == reference.slug:
            tune.fields["C"] = reference.composer
            tune.record.abc = tune.render()
            return
    state.composers.queue(reference)
