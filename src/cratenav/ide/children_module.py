"""
Children Module: navigates to the children modules of the current module.

The current module is the innermost module whose body contains the cursor.
When the cursor sits on a `mod foo` header rather than inside its braces,
the search moves up to the module declaring `foo`, so the result is `foo`
and its siblings. Outside of any module, the file's top-level modules are
returned.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Union

from cratenav.hir import Module, Semantics, Snapshot
from cratenav.spec import (
    FilePosition,
    NavigationTarget,
    NavigationTargetBuilderProtocol,
    RetargetHook,
    SemanticResolverProtocol,
)
from cratenav.syntax import ast, find_ancestor, find_node_at_offset
from .navigation_target import from_module_to_decl


@dataclass(frozen=True)
class EnclosingModule:
    node: ast.Module


@dataclass(frozen=True)
class Root:
    source_file: ast.SourceFile


Scope = Union[EnclosingModule, Root]


def locate_scope(
    source_file: ast.SourceFile,
    offset: int,
    on_header_retarget: Optional[RetargetHook] = None,
) -> Scope:
    module = find_node_at_offset(source_file.syntax, offset, ast.Module)

    if module is not None:
        item_list = module.item_list()
        if item_list is None or not item_list.syntax.text_range.contains_inclusive(
            offset
        ):
            # On the header itself: look inside the module that declares it.
            if on_header_retarget is not None:
                on_header_retarget()
            module = find_ancestor(module.syntax, ast.Module, skip=1)

    if module is None:
        return Root(source_file)
    return EnclosingModule(module)


def scope_declarations(scope: Scope) -> Iterator[ast.Module]:
    """Module declarations that are direct items of the scope."""
    if isinstance(scope, Root):
        yield from scope.source_file.modules()
        return
    item_list = scope.node.item_list()
    if item_list is not None:
        yield from item_list.modules()


def collect_children(
    sema: SemanticResolverProtocol,
    scope: Scope,
    build_targets: NavigationTargetBuilderProtocol,
) -> List[NavigationTarget]:
    targets: List[NavigationTarget] = []
    seen: Set[Module] = set()
    for decl in scope_declarations(scope):
        module = sema.to_def(decl)
        if module is None or module in seen:
            continue
        seen.add(module)
        targets.extend(build_targets(module))
    return targets


def children_module(
    db: Snapshot,
    position: FilePosition,
    on_header_retarget: Optional[RetargetHook] = None,
) -> List[NavigationTarget]:
    """
    Returns a list because a module may be declared from several places.
    """
    sema = Semantics(db)
    source_file = sema.parse(position.file_id)
    scope = locate_scope(source_file, position.offset, on_header_retarget)
    return collect_children(
        sema, scope, lambda module: from_module_to_decl(db, module)
    )
