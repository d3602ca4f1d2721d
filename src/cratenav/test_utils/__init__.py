from .bus import CapturedMessage, SpyBus
from .fixture import annotations, check_children_module, parse_fixture, with_position
from .workspace import WorkspaceFactory

__all__ = [
    "CapturedMessage",
    "SpyBus",
    "WorkspaceFactory",
    "annotations",
    "check_children_module",
    "parse_fixture",
    "with_position",
]
