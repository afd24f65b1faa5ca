from abc import ABC, abstractmethod
from pathlib import Path

from ..exceptions import SourceError
from ..models import Folder


class FolderParser(ABC):
    """Abstract base class for all source-format parsers."""

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Return True if this parser can read the source at path."""

    @abstractmethod
    def build(self, text: str, name: str, source_dir: Path) -> Folder:
        """Parse decoded source text and return a Folder.

        ``source_dir`` is where files referenced by the source are looked up.

        Raises ParseError if the source breaks a structural rule.
        """

    def load(self, path: Path) -> str:
        """Read path as UTF-8 text.

        Raises SourceError if the file cannot be read.
        """
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(str(path), str(exc)) from exc

    def parse(self, path: Path, name: str | None = None) -> Folder:
        """Convenience method: load + build."""
        text = self.load(path)
        return self.build(text, name or name_from_path(path), path.parent)


def name_from_path(path: Path) -> str:
    """Derive a folder name from a file name: trip-hazard.tex → Trip Hazard."""
    return path.stem.replace("-", " ").replace("_", " ").title()
