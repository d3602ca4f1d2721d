from typing import TYPE_CHECKING, List, Optional, Protocol

from .models import FileId, NavigationTarget

if TYPE_CHECKING:
    from cratenav.hir.semantics import Module as HirModule
    from cratenav.syntax import ast


class SemanticResolverProtocol(Protocol):
    """
    Maps syntax to semantics for one database snapshot.
    """

    def parse(self, file_id: FileId) -> "ast.SourceFile":
        """Returns the syntax tree of a file, as seen by this snapshot."""
        ...

    def to_def(self, module: "ast.Module") -> Optional["HirModule"]:
        """
        Resolves a module declaration to the logical module it declares.

        Returns None when the declaration is excluded by cfg or its file
        cannot be found.
        """
        ...


class NavigationTargetBuilderProtocol(Protocol):
    def __call__(self, module: "HirModule") -> List[NavigationTarget]:
        """
        Builds one target per declaration site of the module.
        """
        ...


class RetargetHook(Protocol):
    def __call__(self) -> None: ...
