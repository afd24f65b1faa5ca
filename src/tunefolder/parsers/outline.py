"""Parser for LaTeX outline documents that pull in one abc file per tune.

    \\section{Jigs}
    \\subsection{Jigs 1 --- The kesh set}
    Play each tune twice\\\\
    \\abcinput{jigs/the-kesh}
    \\abcinput{jigs/morrisons}

Sections and sets come straight from ``\\section`` and ``\\subsection``;
there is no header inheritance.  Plain lines right after a subsection are
the set's notes.  Tune files are resolved relative to the outline, with an
``.abc`` suffix.
"""

import logging
import re
from collections.abc import Callable
from pathlib import Path

from ..exceptions import DuplicateSlugError, MissingContextError
from ..models import Folder, Section, Tune, TuneSet
from .base import FolderParser
from .utils import TagCollector, extract_tags, slugify

logger = logging.getLogger(__name__)

SECTION_RE = re.compile(r"\\section\{(.*)\}")
SUBSECTION_RE = re.compile(r"\\subsection\{(.*)\}")
ABC_INPUT_RE = re.compile(r"\\abcinput\{(.*)\}")


class OutlineFolderParser(FolderParser):
    """Parser for ``.tex`` outlines referencing per-tune ``.abc`` files."""

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        return path.suffix.lower() == ".tex"

    def build(self, text: str, name: str, source_dir: Path) -> Folder:
        return build_folder_from_outline(
            name, text, lambda filename: self.load(source_dir / f"{filename}.abc")
        )


def build_folder_from_outline(name: str, text: str, load_tune: Callable[[str], str]) -> Folder:
    """Walk an outline and return a :class:`~tunefolder.models.Folder`.

    Args:
        name:      Folder name.
        text:      Outline document, already decoded.
        load_tune: Returns the abc text for an ``\\abcinput`` argument.

    Raises:
        MissingContextError: a subsection before any section, or a tune
            before any subsection.
    """
    folder = Folder(name=name)
    section: Section | None = None
    tune_set: TuneSet | None = None
    tags: TagCollector | None = None
    last_seen: str | None = None  # "section", "set" or "tune"

    for line_number, line in enumerate(text.splitlines(), start=1):
        section_name = _match(SECTION_RE, line)
        subsection_name = _match(SUBSECTION_RE, line)
        abc_filename = _match(ABC_INPUT_RE, line)

        if section_name:
            section = Section(name=replace_tex_escapes(section_name))
            folder.content.append(section)
            last_seen = "section"

        if subsection_name:
            if section is None:
                raise MissingContextError(line_number, line, "Section")
            slug = slugify(subsection_name.replace("/", " "))
            if any(existing.slug == slug for existing in folder.sets()):
                raise DuplicateSlugError(line_number, line, slug)
            tags = TagCollector()
            tune_set = TuneSet(
                name=replace_tex_escapes(subsection_name), slug=slug, tags=tags.tags
            )
            section.content.append(tune_set)
            last_seen = "set"

        if abc_filename:
            if tune_set is None:
                raise MissingContextError(line_number, line, "Set")
            abc = load_tune(abc_filename)
            tune_set.content.append(
                Tune(filename=abc_filename, slug=slugify(abc_filename.replace("/", " ")), abc=abc)
            )
            tags.extend(extract_tags(abc))
            last_seen = "tune"

        stripped = line.strip()
        if last_seen == "set" and stripped and not stripped.startswith(("\\", "%")):
            tune_set.notes.append(stripped.replace("\\\\", "").strip())

    logger.debug("Built folder %r from outline: %d sets", name, len(folder.sets()))
    return folder


def replace_tex_escapes(text: str) -> str:
    """Turn TeX's ``---`` into an em dash."""
    return text.replace("---", "\u2014")


def _match(pattern: re.Pattern, line: str) -> str | None:
    m = pattern.search(line)
    return m.group(1) if m else None
