import json
import os
from collections import ChainMap
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from .pointer import SemanticPointer


class ResourceLoaderProtocol(Protocol):
    def load(self, lang: str) -> Dict[str, Any]: ...


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = value
    return flat


class JsonAssetLoader(ResourceLoaderProtocol):
    """
    Loads `<root>/<lang>/*.json` into one flat mapping of dotted keys.
    Unreadable files are skipped.
    """

    def __init__(self, root: Path):
        self.root = root

    def load(self, lang: str) -> Dict[str, Any]:
        lang_dir = self.root / lang
        if not lang_dir.is_dir():
            return {}
        merged: Dict[str, Any] = {}
        for path in sorted(lang_dir.glob("*.json")):
            try:
                with path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError):
                continue
            if isinstance(data, dict):
                merged.update(_flatten(data))
        return merged


class DictLoader(ResourceLoaderProtocol):
    """Serves messages from memory; used for overrides and in tests."""

    def __init__(self, data: Dict[str, Dict[str, Any]]):
        self._data = data

    def load(self, lang: str) -> Dict[str, Any]:
        return _flatten(self._data.get(lang, {}))


class OverlayNexus:
    """
    Resolves message keys against an ordered stack of loaders.

    Loaders earlier in the list override later ones. Lookup falls back from
    the requested language to the default language, then to the key itself.
    """

    def __init__(self, loaders: List[ResourceLoaderProtocol], default_lang: str = "en"):
        self.loaders = loaders
        self.default_lang = default_lang
        self._views: Dict[str, ChainMap] = {}

    def _view(self, lang: str) -> ChainMap:
        if lang not in self._views:
            self._views[lang] = ChainMap(*[loader.load(lang) for loader in self.loaders])
        return self._views[lang]

    def _resolve_lang(self, explicit_lang: Optional[str] = None) -> str:
        if explicit_lang:
            return explicit_lang

        env_lang = os.getenv("CRATENAV_LANG")
        if env_lang:
            return env_lang

        # e.g. "de_DE.UTF-8" -> "de"
        system_lang = os.getenv("LANG")
        if system_lang:
            base_lang = system_lang.split(".")[0].split("_")[0].lower()
            if base_lang and base_lang not in ("c", "posix"):
                return base_lang

        return self.default_lang

    def get(
        self, pointer: Union[str, SemanticPointer], lang: Optional[str] = None
    ) -> str:
        key = str(pointer)
        target_lang = self._resolve_lang(lang)

        value = self._view(target_lang).get(key)
        if value is not None:
            return str(value)

        if target_lang != self.default_lang:
            value = self._view(self.default_lang).get(key)
            if value is not None:
                return str(value)

        return key

    def reload(self, lang: Optional[str] = None) -> None:
        if lang:
            self._views.pop(lang, None)
        else:
            self._views.clear()
