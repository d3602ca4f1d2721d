from typing import Any, Optional, Protocol, Union

from cratenav.common.pointer import SemanticPointer
from .protocols import Renderer


class MessageSource(Protocol):
    def get(self, pointer: Union[str, SemanticPointer], lang: Optional[str] = None) -> str: ...


class MessageBus:
    """
    Routes user-facing messages, identified by semantic pointers, to the
    active renderer. Without a renderer, messages are dropped.
    """

    def __init__(self, source: MessageSource):
        self._source = source
        self._renderer: Optional[Renderer] = None

    def set_renderer(self, renderer: Optional[Renderer]) -> None:
        self._renderer = renderer

    def render_to_string(
        self, msg_id: Union[str, SemanticPointer], **kwargs: Any
    ) -> str:
        template = self._source.get(msg_id)
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            return template

    def _render(
        self, level: str, msg_id: Union[str, SemanticPointer], **kwargs: Any
    ) -> None:
        if self._renderer is None:
            return
        self._renderer.render(self.render_to_string(msg_id, **kwargs), level)

    def debug(self, msg_id: Union[str, SemanticPointer], **kwargs: Any) -> None:
        self._render("debug", msg_id, **kwargs)

    def info(self, msg_id: Union[str, SemanticPointer], **kwargs: Any) -> None:
        self._render("info", msg_id, **kwargs)

    def success(self, msg_id: Union[str, SemanticPointer], **kwargs: Any) -> None:
        self._render("success", msg_id, **kwargs)

    def warning(self, msg_id: Union[str, SemanticPointer], **kwargs: Any) -> None:
        self._render("warning", msg_id, **kwargs)

    def error(self, msg_id: Union[str, SemanticPointer], **kwargs: Any) -> None:
        self._render("error", msg_id, **kwargs)
