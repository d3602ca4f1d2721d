from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import cratenav.common
from cratenav.common.pointer import SemanticPointer

MessageId = Union[str, SemanticPointer]


@dataclass(frozen=True)
class CapturedMessage:
    level: str
    id: str
    params: Dict[str, Any]
    # What the message renders to with the active nexus.
    text: str


class SpyBus:
    """
    Captures every message sent through `cratenav.common.bus`, together with
    its rendered text, instead of printing it.
    """

    def __init__(self):
        self.messages: List[CapturedMessage] = []

    def install(self, monkeypatch: Any) -> "SpyBus":
        real_bus = cratenav.common.bus

        def capture(level: str, msg_id: MessageId, **kwargs: Any) -> None:
            self.messages.append(
                CapturedMessage(
                    level=level,
                    id=str(msg_id),
                    params=dict(kwargs),
                    text=real_bus.render_to_string(msg_id, **kwargs),
                )
            )

        monkeypatch.setattr(real_bus, "_render", capture)
        return self

    def at_level(self, level: str) -> List[CapturedMessage]:
        return [m for m in self.messages if m.level == level]

    def assert_id_called(
        self, msg_id: MessageId, level: Optional[str] = None
    ) -> CapturedMessage:
        key = str(msg_id)
        for message in self.messages:
            if message.id == key and (level is None or message.level == level):
                return message

        seen = [f"{m.level}:{m.id}" for m in self.messages]
        raise AssertionError(f"Message '{key}' was not sent.\nCaptured: {seen}")

    def assert_text_contains(
        self, fragment: str, level: Optional[str] = None
    ) -> CapturedMessage:
        for message in self.messages:
            if fragment in message.text and (level is None or message.level == level):
                return message

        texts = [m.text for m in self.messages]
        raise AssertionError(f"No message contains '{fragment}'.\nCaptured: {texts}")
