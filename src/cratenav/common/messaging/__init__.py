from .bus import MessageBus, MessageSource
from .protocols import Renderer

__all__ = ["MessageBus", "MessageSource", "Renderer"]
