"""Discovery bounded context: the universe of candidate paths."""

from TestPathSelection.discovery.filesystem import ProjectFileSystem, StaticFileSystem
from TestPathSelection.discovery.ports import FileSystem

__all__ = [
    "FileSystem",
    "ProjectFileSystem",
    "StaticFileSystem",
]
