from .exceptions import Cancelled, ConfigError, CratenavError, FixtureError
from .models import (
    FileId,
    FilePosition,
    FileRange,
    NavigationTarget,
    SymbolKind,
    TextRange,
)
from .protocols import (
    NavigationTargetBuilderProtocol,
    RetargetHook,
    SemanticResolverProtocol,
)

__all__ = [
    "Cancelled",
    "ConfigError",
    "CratenavError",
    "FixtureError",
    "FileId",
    "FilePosition",
    "FileRange",
    "NavigationTarget",
    "SymbolKind",
    "TextRange",
    "NavigationTargetBuilderProtocol",
    "RetargetHook",
    "SemanticResolverProtocol",
]
