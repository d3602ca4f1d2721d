from typing import List

from cratenav.hir import Module, Snapshot
from cratenav.spec import NavigationTarget, SymbolKind, TextRange


def from_module_to_decl(db: Snapshot, module: Module) -> List[NavigationTarget]:
    """
    One target per declaration site of `module`, focused on the name.

    A crate root has no declaration, so it navigates to its whole file.
    """
    name = module.name(db) or ""
    sites = module.declaration_sites(db)
    if not sites:
        file_id = module.definition_file(db)
        text = db.file_text(file_id)
        return [
            NavigationTarget(
                file_id=file_id,
                full_range=TextRange(0, len(text)),
                name=name,
                kind=SymbolKind.MODULE,
            )
        ]

    targets: List[NavigationTarget] = []
    for site in sites:
        decl = site.value
        name_node = decl.name()
        targets.append(
            NavigationTarget(
                file_id=site.file_id,
                full_range=decl.syntax.text_range,
                name=name,
                kind=SymbolKind.MODULE,
                focus_range=name_node.syntax.text_range if name_node else None,
                description=_describe(decl),
            )
        )
    return targets


def _describe(decl) -> str:
    visibility = decl.visibility()
    prefix = f"{visibility.syntax.text} " if visibility is not None else ""
    name = decl.name()
    return f"{prefix}mod {name.text if name else ''}".strip()
