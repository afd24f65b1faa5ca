from pathlib import Path

from .exceptions import UnsupportedSourceError
from .parsers.abc_file import AbcFolderParser
from .parsers.base import FolderParser
from .parsers.outline import OutlineFolderParser

_PARSERS: list[type[FolderParser]] = [
    AbcFolderParser,
    OutlineFolderParser,
]


def get_parser(path: Path) -> FolderParser:
    """Return an instantiated parser for the given source path.

    Raises UnsupportedSourceError if no parser matches.
    """
    for cls in _PARSERS:
        if cls.can_handle(path):
            return cls()
    raise UnsupportedSourceError(str(path))
