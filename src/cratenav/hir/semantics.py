from dataclasses import dataclass
from typing import List, Optional

from cratenav.spec import FileId
from cratenav.syntax import ast
from .db import CrateId, Snapshot
from .def_map import DeclSite, FileSource, LocalModuleId


@dataclass(frozen=True)
class InFile:
    """A syntax node together with the file it belongs to."""

    file_id: FileId
    value: ast.AstNode


@dataclass(frozen=True)
class Module:
    """A logical module: one node of a crate's `DefMap`."""

    crate_id: CrateId
    local_id: LocalModuleId

    def name(self, db: Snapshot) -> Optional[str]:
        return db.crate_def_map(self.crate_id)[self.local_id].name

    def is_crate_root(self) -> bool:
        return self.local_id == 0

    def parent(self, db: Snapshot) -> Optional["Module"]:
        parent = db.crate_def_map(self.crate_id)[self.local_id].parent
        return None if parent is None else Module(self.crate_id, parent)

    def children(self, db: Snapshot) -> List["Module"]:
        def_map = db.crate_def_map(self.crate_id)
        return [Module(self.crate_id, c) for c in def_map.children(self.local_id)]

    def definition_file(self, db: Snapshot) -> FileId:
        return db.crate_def_map(self.crate_id)[self.local_id].source.file_id

    def is_file_module(self, db: Snapshot) -> bool:
        source = db.crate_def_map(self.crate_id)[self.local_id].source
        return isinstance(source, FileSource)

    def declaration_sites(self, db: Snapshot) -> List[InFile]:
        """
        Every `mod` declaration of this module, in collection order. Empty
        for a crate root.
        """
        db.unwind_if_cancelled()
        sites = db.crate_def_map(self.crate_id)[self.local_id].declarations
        result: List[InFile] = []
        for site in sites:
            node = db.parse(site.file_id).node(site.node_index)
            result.append(InFile(site.file_id, ast.Module(node)))
        return result


class Semantics:
    """
    Bridges syntax trees and the logical module tree for one snapshot.
    """

    def __init__(self, db: Snapshot):
        self.db = db

    def parse(self, file_id: FileId) -> ast.SourceFile:
        return ast.SourceFile(self.db.parse(file_id).root)

    def to_def(self, module: ast.Module) -> Optional[Module]:
        self.db.unwind_if_cancelled()
        site = DeclSite(module.syntax.file_id, module.syntax.index)
        for crate_id in self.db.relevant_crates(site.file_id):
            local_id = self.db.crate_def_map(crate_id).module_for_declaration(site)
            if local_id is not None:
                return Module(crate_id, local_id)
        return None

    def file_to_module_defs(self, file_id: FileId) -> List[Module]:
        """The file-level modules a file defines, one per crate."""
        modules: List[Module] = []
        for crate_id in self.db.relevant_crates(file_id):
            def_map = self.db.crate_def_map(crate_id)
            for local_id in def_map.modules_for_file(file_id):
                if isinstance(def_map[local_id].source, FileSource):
                    modules.append(Module(crate_id, local_id))
        return modules
