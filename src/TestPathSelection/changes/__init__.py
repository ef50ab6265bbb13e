"""Changes bounded context: version-control change detection."""

from TestPathSelection.changes.git import GitChangedFiles
from TestPathSelection.changes.hg import HgChangedFiles
from TestPathSelection.changes.ports import ChangedFilesProvider
from TestPathSelection.changes.resolver import ChangeSetResolver

__all__ = [
    "ChangeSetResolver",
    "ChangedFilesProvider",
    "GitChangedFiles",
    "HgChangedFiles",
]
