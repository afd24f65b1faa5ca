class TuneFolderError(Exception):
    """Base exception for tunefolder."""


class SourceError(TuneFolderError):
    """Raised when a source document cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path}: {reason}")


class UnsupportedSourceError(TuneFolderError):
    """Raised when no parser matches the given source path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No parser found for source: {path}")


class ParseError(TuneFolderError):
    """Raised when a source document breaks a structural rule.

    ``line_number`` is 1-based; ``line`` is the offending source text.
    """

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason} ({line.strip()!r})")


class SectionInferenceError(ParseError):
    """Raised when a set title does not name a section."""

    def __init__(self, line_number: int, line: str, title: str):
        self.title = title
        super().__init__(line_number, line, f'Couldn\'t infer section title from "{title}"')


class NonContiguousSectionError(ParseError):
    """Raised when a section reappears after a different section."""

    def __init__(self, line_number: int, line: str, section: str, current: str | None):
        self.section = section
        self.current = current
        super().__init__(
            line_number,
            line,
            f'Non-contiguous sections: "{section}" reappears after "{current}"',
        )


class HeaderOrderError(ParseError):
    """Raised when a header line appears before any tune has been opened."""

    def __init__(self, line_number: int, line: str):
        super().__init__(line_number, line, "Header line before any tune was opened")


class UnresolvedComposerError(ParseError):
    """Raised when a composer back-reference names a tune missing from its set."""

    def __init__(self, line_number: int, line: str, title: str, set_name: str | None):
        self.title = title
        self.set_name = set_name
        super().__init__(
            line_number,
            line,
            f'Composer refers to "{title}", which is not a tune in set "{set_name}"',
        )


class DuplicateSlugError(ParseError):
    """Raised when two sets in one folder share a slug."""

    def __init__(self, line_number: int, line: str, slug: str):
        self.slug = slug
        super().__init__(line_number, line, f'Set slug "{slug}" is already in use')


class MissingContextError(ParseError):
    """Raised when an outline directive appears before its parent exists."""

    def __init__(self, line_number: int, line: str, missing: str):
        self.missing = missing
        super().__init__(
            line_number,
            line,
            f"{missing} does not exist, is your LaTeX in a sensible order",
        )
