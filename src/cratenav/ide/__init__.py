from .analysis import Analysis, AnalysisHost
from .children_module import (
    EnclosingModule,
    Root,
    children_module,
    collect_children,
    locate_scope,
)
from .navigation_target import from_module_to_decl

__all__ = [
    "Analysis",
    "AnalysisHost",
    "EnclosingModule",
    "Root",
    "children_module",
    "collect_children",
    "locate_scope",
    "from_module_to_decl",
]
