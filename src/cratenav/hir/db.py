import threading
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from cratenav.spec import Cancelled, FileId
from cratenav.syntax import SyntaxTree, parse
from .cfg import CfgOptions

if TYPE_CHECKING:
    from .def_map import DefMap

CrateId = int


def normalize_path(path: str) -> str:
    """Virtual file paths are absolute posix paths: `/src/lib.rs`."""
    posix = PurePosixPath("/") / PurePosixPath(path.replace("\\", "/"))
    parts: List[str] = []
    for part in posix.parts[1:]:
        if part == "..":
            if parts:
                parts.pop()
        elif part != ".":
            parts.append(part)
    return "/" + "/".join(parts)


@dataclass(frozen=True)
class CrateData:
    root_file_id: FileId
    cfg_options: CfgOptions = field(default_factory=CfgOptions)
    display_name: Optional[str] = None


@dataclass(frozen=True)
class CrateSpec:
    """A crate as described by a `Change`, before file ids are assigned."""

    root_path: str
    cfg_options: CfgOptions = field(default_factory=CfgOptions)
    display_name: Optional[str] = None


class Change:
    """A batch of edits applied atomically by `RootDatabase.apply_change`."""

    def __init__(self):
        self.files: Dict[str, Optional[str]] = {}
        self.crates: Optional[List[CrateSpec]] = None

    def set_file_text(self, path: str, text: str) -> "Change":
        self.files[normalize_path(path)] = text
        return self

    def remove_file(self, path: str) -> "Change":
        self.files[normalize_path(path)] = None
        return self

    def set_crates(self, crates: List[CrateSpec]) -> "Change":
        self.crates = list(crates)
        return self

    def is_empty(self) -> bool:
        return not self.files and self.crates is None


class _State:
    """One immutable revision of the inputs plus the values derived from it."""

    def __init__(
        self,
        revision: int,
        path_to_id: Dict[str, FileId],
        texts: Dict[FileId, str],
        crates: Tuple[CrateData, ...],
    ):
        self.revision = revision
        self.path_to_id = path_to_id
        self.id_to_path = {file_id: path for path, file_id in path_to_id.items()}
        self.texts = texts
        self.crates = crates
        self.parse_cache: Dict[FileId, SyntaxTree] = {}
        self.def_map_cache: Dict[CrateId, "DefMap"] = {}
        self.lock = threading.Lock()


class RootDatabase:
    """
    Owns the inputs (file texts and crate graph) and hands out snapshots.

    Applying a change creates a new revision; snapshots taken before it
    raise `Cancelled` on their next query.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._next_file_id = 0
        self._state = _State(0, {}, {}, ())

    @property
    def revision(self) -> int:
        return self._state.revision

    def apply_change(self, change: Change) -> None:
        with self._lock:
            old = self._state
            path_to_id = dict(old.path_to_id)
            texts = dict(old.texts)

            for path, text in change.files.items():
                file_id = path_to_id.get(path)
                if text is None:
                    if file_id is not None:
                        texts.pop(file_id, None)
                    continue
                if file_id is None:
                    file_id = self._next_file_id
                    self._next_file_id += 1
                    path_to_id[path] = file_id
                texts[file_id] = text

            crates = old.crates
            if change.crates is not None:
                resolved: List[CrateData] = []
                for spec in change.crates:
                    root_path = normalize_path(spec.root_path)
                    if root_path not in path_to_id:
                        raise KeyError(f"Crate root '{root_path}' is not a known file")
                    resolved.append(
                        CrateData(
                            root_file_id=path_to_id[root_path],
                            cfg_options=spec.cfg_options,
                            display_name=spec.display_name,
                        )
                    )
                crates = tuple(resolved)

            self._state = _State(old.revision + 1, path_to_id, texts, crates)

    def snapshot(self) -> "Snapshot":
        return Snapshot(self, self._state)


class Snapshot:
    """
    A read-only view of one database revision.

    All reads go through `unwind_if_cancelled`, so a snapshot outliving its
    revision fails fast instead of mixing old and new inputs.
    """

    def __init__(self, db: RootDatabase, state: _State):
        self._db = db
        self._state = state

    @property
    def revision(self) -> int:
        return self._state.revision

    def unwind_if_cancelled(self) -> None:
        current = self._db.revision
        if current != self._state.revision:
            raise Cancelled(self._state.revision, current)

    # --- Inputs ---

    def file_text(self, file_id: FileId) -> str:
        self.unwind_if_cancelled()
        return self._state.texts[file_id]

    def file_path(self, file_id: FileId) -> str:
        return self._state.id_to_path[file_id]

    def file_id(self, path: str) -> Optional[FileId]:
        file_id = self._state.path_to_id.get(normalize_path(path))
        if file_id is None or file_id not in self._state.texts:
            return None
        return file_id

    def files(self) -> Iterator[FileId]:
        return iter(sorted(self._state.texts))

    def crate_ids(self) -> List[CrateId]:
        return list(range(len(self._state.crates)))

    def crate_data(self, crate_id: CrateId) -> CrateData:
        return self._state.crates[crate_id]

    # --- Derived ---

    def parse(self, file_id: FileId) -> SyntaxTree:
        self.unwind_if_cancelled()
        state = self._state
        with state.lock:
            tree = state.parse_cache.get(file_id)
        if tree is None:
            tree = parse(state.texts[file_id], file_id)
            with state.lock:
                tree = state.parse_cache.setdefault(file_id, tree)
        return tree

    def crate_def_map(self, crate_id: CrateId) -> "DefMap":
        from .def_map import DefCollector

        self.unwind_if_cancelled()
        state = self._state
        with state.lock:
            def_map = state.def_map_cache.get(crate_id)
        if def_map is None:
            def_map = DefCollector(self, crate_id).collect()
            with state.lock:
                def_map = state.def_map_cache.setdefault(crate_id, def_map)
        return def_map

    def relevant_crates(self, file_id: FileId) -> List[CrateId]:
        """Crates, in crate-graph order, in which the file is a module."""
        return [
            crate_id
            for crate_id in self.crate_ids()
            if self.crate_def_map(crate_id).modules_for_file(file_id)
        ]
