from typing import Any, Union


class SemanticPointer:
    """
    A dotted message key built by attribute access: `L.children.run.none`
    is the key "children.run.none".
    """

    __slots__ = ("_path",)

    def __init__(self, path: str = ""):
        object.__setattr__(self, "_path", path)

    def __getattr__(self, name: str) -> "SemanticPointer":
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return SemanticPointer(f"{self._path}.{name}" if self._path else name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("SemanticPointer is immutable")

    def __truediv__(self, other: Union[str, "SemanticPointer"]) -> "SemanticPointer":
        suffix = str(other).strip(".")
        if not suffix:
            return self
        return SemanticPointer(f"{self._path}.{suffix}" if self._path else suffix)

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"<L: '{self._path}'>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SemanticPointer, str)):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._path)


L = SemanticPointer()
