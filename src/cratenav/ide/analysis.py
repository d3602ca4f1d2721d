from typing import List, Optional

from cratenav.hir import Change, RootDatabase, Snapshot
from cratenav.spec import FileId, FilePosition, NavigationTarget, RetargetHook
from cratenav.syntax import LineIndex
from .children_module import children_module


class AnalysisHost:
    """Owns the mutable database; `analysis()` hands out read-only views."""

    def __init__(self, db: Optional[RootDatabase] = None):
        self.db = db or RootDatabase()

    def apply_change(self, change: Change) -> None:
        self.db.apply_change(change)

    def analysis(self) -> "Analysis":
        return Analysis(self.db.snapshot())


class Analysis:
    """
    The query facade over one snapshot. Every method may raise `Cancelled`
    once the host has applied a newer change.
    """

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def file_text(self, file_id: FileId) -> str:
        return self.snapshot.file_text(file_id)

    def file_path(self, file_id: FileId) -> str:
        return self.snapshot.file_path(file_id)

    def file_id(self, path: str) -> Optional[FileId]:
        return self.snapshot.file_id(path)

    def file_line_index(self, file_id: FileId) -> LineIndex:
        return LineIndex(self.snapshot.file_text(file_id))

    def children_module(
        self,
        position: FilePosition,
        on_header_retarget: Optional[RetargetHook] = None,
    ) -> List[NavigationTarget]:
        return children_module(self.snapshot, position, on_header_retarget)
