"""Composer back-references.

``C:Traditional (Second Tune)`` credits *Second Tune*, whichever tune it is
written under.  Such lines are queued by the slug of the named tune and
applied when that tune is committed.  Every reference must be resolved by
the end of the set it was written in.
"""

import re
from dataclasses import dataclass

from ..exceptions import UnresolvedComposerError
from .utils import slugify

# "<Name> (<Tune Title>)"
COMPOSER_REF_RE = re.compile(r"^(?P<composer>.+?)\s*\((?P<title>[^()]+)\)$")


@dataclass
class PendingComposer:
    """A composer credit waiting for the tune it names."""

    composer: str
    title: str
    slug: str
    line_number: int
    line: str


def parse_composer_reference(value: str, line_number: int, line: str) -> PendingComposer | None:
    """Return a :class:`PendingComposer` if *value* names another tune."""
    m = COMPOSER_REF_RE.match(value.strip())
    if not m:
        return None
    title = m.group("title").strip()
    return PendingComposer(
        composer=m.group("composer").strip(),
        title=title,
        slug=slugify(title),
        line_number=line_number,
        line=line,
    )


class ComposerResolver:
    """Pending composer references for the set being parsed."""

    def __init__(self) -> None:
        self.pending: list[PendingComposer] = []

    def queue(self, reference: PendingComposer) -> None:
        self.pending.append(reference)

    def resolve(self, slug: str) -> str | None:
        """Pop every reference to *slug*; return the composer of the latest one."""
        matched = [ref for ref in self.pending if ref.slug == slug]
        if not matched:
            return None
        self.pending = [ref for ref in self.pending if ref.slug != slug]
        return matched[-1].composer

    def check_resolved(self, set_name: str | None) -> None:
        """Raise for the first reference still pending, then start afresh."""
        pending, self.pending = self.pending, []
        if pending:
            ref = pending[0]
            raise UnresolvedComposerError(ref.line_number, ref.line, ref.title, set_name)
