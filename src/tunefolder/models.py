from dataclasses import dataclass, field


@dataclass
class Tune:
    """One notated tune.

    ``abc`` is the reconstructed notation: header lines followed by body lines.
    ``filename`` is empty for tunes that came from a multi-tune document.
    """

    filename: str
    slug: str
    abc: str


@dataclass
class TuneSet:
    """A titled group of tunes played together."""

    name: str
    slug: str
    notes: list[str] = field(default_factory=list)
    content: list[Tune] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    next_slug: str | None = None  # filled in by the next/previous linker
    previous_slug: str | None = None


@dataclass
class Section:
    """A named run of sets, e.g. "Jigs"."""

    name: str
    content: list[TuneSet] = field(default_factory=list)


@dataclass
class Folder:
    """Root of one parsed document."""

    name: str
    content: list[Section] = field(default_factory=list)

    def sets(self) -> list[TuneSet]:
        """Return every set across all sections in document order."""
        return [tune_set for section in self.content for tune_set in section.content]
