from pathlib import Path
from typing import Any, Union

from .messaging import MessageBus
from .nexus import JsonAssetLoader, OverlayNexus
from .pointer import L, SemanticPointer

# --- Composition Root for user-facing messages ---
# Built-in assets ship with the package; callers may insert loaders in
# front of this one to override individual messages.
_assets_root = Path(__file__).parent / "assets"
cratenav_nexus = OverlayNexus(loaders=[JsonAssetLoader(_assets_root)])

bus = MessageBus(cratenav_nexus)


def cratenav_operator(key: Union[str, SemanticPointer], **kwargs: Any) -> str:
    """Renders a message key to its final string, for help texts and prompts."""
    return bus.render_to_string(key, **kwargs)


__all__ = ["bus", "cratenav_nexus", "cratenav_operator", "L", "SemanticPointer"]
