import logging
import posixpath
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Union

import networkx as nx

from cratenav.spec import FileId
from cratenav.syntax import ast
from .cfg import parse_cfg, CfgOptions, CfgInvalid
from .db import CrateId, Snapshot, normalize_path

log = logging.getLogger(__name__)

LocalModuleId = int

# Only `mod.rs` files (and crate roots) keep their children next to them.
MOD_RS_NAME = "mod.rs"


@dataclass(frozen=True)
class DeclSite:
    """A `mod name` declaration, identified by file and node index."""

    file_id: FileId
    node_index: int


@dataclass(frozen=True)
class FileSource:
    file_id: FileId


@dataclass(frozen=True)
class InlineSource:
    file_id: FileId
    item_list_index: int


ModuleSource = Union[FileSource, InlineSource]


@dataclass
class ModuleData:
    local_id: LocalModuleId
    name: Optional[str]
    parent: Optional[LocalModuleId]
    source: ModuleSource
    # Directory searched for the files of `mod foo;` children.
    mod_dir: str
    declarations: List[DeclSite] = field(default_factory=list)


class DefMap:
    """
    The module tree of one crate.

    Nodes of `graph` are local module ids carrying their `ModuleData`;
    edges run from parent to child, in declaration order.
    """

    ROOT: LocalModuleId = 0

    def __init__(self, crate_id: CrateId):
        self.crate_id = crate_id
        self.graph = nx.DiGraph()
        self._decl_to_module: Dict[DeclSite, LocalModuleId] = {}
        self._file_to_modules: Dict[FileId, List[LocalModuleId]] = {}

    def add_module(
        self,
        name: Optional[str],
        parent: Optional[LocalModuleId],
        source: ModuleSource,
        mod_dir: str,
        declaration: Optional[DeclSite] = None,
    ) -> LocalModuleId:
        local_id = self.graph.number_of_nodes()
        data = ModuleData(local_id, name, parent, source, mod_dir)
        self.graph.add_node(local_id, data=data)
        if parent is not None:
            self.graph.add_edge(parent, local_id, name=name)
        if declaration is not None:
            self.add_declaration(local_id, declaration)
        self._file_to_modules.setdefault(source.file_id, []).append(local_id)
        return local_id

    def add_declaration(self, local_id: LocalModuleId, site: DeclSite) -> None:
        self.graph.nodes[local_id]["data"].declarations.append(site)
        self._decl_to_module[site] = local_id

    def __getitem__(self, local_id: LocalModuleId) -> ModuleData:
        return self.graph.nodes[local_id]["data"]

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def modules(self) -> Iterable[ModuleData]:
        for local_id in self.graph.nodes:
            yield self[local_id]

    def children(self, local_id: LocalModuleId) -> List[LocalModuleId]:
        return list(self.graph.successors(local_id))

    def child_by_name(
        self, local_id: LocalModuleId, name: str
    ) -> Optional[LocalModuleId]:
        for child in self.graph.successors(local_id):
            if self[child].name == name:
                return child
        return None

    def module_for_declaration(self, site: DeclSite) -> Optional[LocalModuleId]:
        return self._decl_to_module.get(site)

    def modules_for_file(self, file_id: FileId) -> List[LocalModuleId]:
        return list(self._file_to_modules.get(file_id, ()))

    def path_to_root(self, local_id: LocalModuleId) -> List[LocalModuleId]:
        """The module and its ancestors, innermost first."""
        path = [local_id]
        predecessors = list(self.graph.predecessors(local_id))
        while predecessors:
            path.append(predecessors[0])
            predecessors = list(self.graph.predecessors(predecessors[0]))
        return path


def is_cfg_enabled(attrs: Iterable[ast.Attr], options: CfgOptions) -> bool:
    for attr in attrs:
        if attr.path != "cfg":
            continue
        tokens = attr.token_tree()
        expr = parse_cfg(tokens) if tokens is not None else CfgInvalid()
        if not options.is_enabled(expr):
            return False
    return True


class DefCollector:
    """
    Builds the `DefMap` of a crate by walking module declarations from the
    crate root, loading out-of-line modules from the database.
    """

    def __init__(self, db: Snapshot, crate_id: CrateId):
        self.db = db
        self.crate_id = crate_id
        self.crate = db.crate_data(crate_id)
        self.def_map = DefMap(crate_id)
        self._claimed_files: Set[FileId] = set()

    def collect(self) -> DefMap:
        root_file = self.crate.root_file_id
        root_path = self.db.file_path(root_file)
        mod_dir = posixpath.dirname(root_path)

        root = self.def_map.add_module(None, None, FileSource(root_file), mod_dir)
        self._claimed_files.add(root_file)

        source_file = ast.SourceFile(self.db.parse(root_file).root)
        self._collect_items(root, root_file, source_file, mod_dir, in_file_root=True)

        log.debug(
            f"Collected {len(self.def_map)} modules for crate "
            f"'{self.crate.display_name or root_path}'"
        )
        return self.def_map

    def _collect_items(
        self,
        module_id: LocalModuleId,
        file_id: FileId,
        container: Union[ast.SourceFile, ast.ItemList],
        mod_dir: str,
        in_file_root: bool,
    ) -> None:
        for decl in container.modules():
            self.db.unwind_if_cancelled()
            name = decl.name()
            if name is None:
                continue

            item_list = decl.item_list()
            attrs = list(decl.attrs())
            if item_list is not None:
                attrs.extend(item_list.attrs())
            if not is_cfg_enabled(attrs, self.crate.cfg_options):
                log.debug(f"Module '{name.text}' is disabled by cfg")
                continue

            site = DeclSite(file_id, decl.syntax.index)
            existing = self.def_map.child_by_name(module_id, name.text)
            if existing is not None:
                self.def_map.add_declaration(existing, site)
                continue

            if item_list is not None:
                child_dir = posixpath.join(mod_dir, name.text)
                child = self.def_map.add_module(
                    name.text,
                    module_id,
                    InlineSource(file_id, item_list.syntax.index),
                    child_dir,
                    declaration=site,
                )
                self._collect_items(child, file_id, item_list, child_dir, False)
                continue

            self._collect_file_module(
                module_id, decl, name.text, site, mod_dir, in_file_root
            )

    def _collect_file_module(
        self,
        parent: LocalModuleId,
        decl: ast.Module,
        name: str,
        site: DeclSite,
        mod_dir: str,
        in_file_root: bool,
    ) -> None:
        path_attr = next((a for a in decl.attrs() if a.path == "path"), None)
        attr_path = path_attr.string_value() if path_attr is not None else None
        if attr_path:
            base = (
                posixpath.dirname(self.db.file_path(site.file_id))
                if in_file_root
                else mod_dir
            )
            candidates = [normalize_path(posixpath.join(base, attr_path))]
        else:
            candidates = [
                normalize_path(posixpath.join(mod_dir, f"{name}.rs")),
                normalize_path(posixpath.join(mod_dir, name, "mod.rs")),
            ]

        child_file = None
        for candidate in candidates:
            child_file = self.db.file_id(candidate)
            if child_file is not None:
                break

        if child_file is None:
            log.debug(f"Unresolved module '{name}': tried {', '.join(candidates)}")
            return
        if child_file in self._claimed_files:
            log.debug(f"Module '{name}': file {candidates[0]} is already a module")
            return

        source_file = ast.SourceFile(self.db.parse(child_file).root)
        if not is_cfg_enabled(source_file.attrs(), self.crate.cfg_options):
            log.debug(f"Module '{name}' is disabled by an inner cfg")
            return

        child_path = self.db.file_path(child_file)
        if attr_path or posixpath.basename(child_path) == MOD_RS_NAME:
            child_dir = posixpath.dirname(child_path)
        else:
            child_dir = posixpath.splitext(child_path)[0]

        self._claimed_files.add(child_file)
        child = self.def_map.add_module(
            name, parent, FileSource(child_file), child_dir, declaration=site
        )
        self._collect_items(child, child_file, source_file, child_dir, True)
