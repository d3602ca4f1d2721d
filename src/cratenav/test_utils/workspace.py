from pathlib import Path
from textwrap import dedent
from typing import Dict, List, Optional


class WorkspaceFactory:
    """Builds a throwaway Cargo workspace on disk, one file at a time."""

    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files: Dict[str, str] = {}

    def with_cargo_toml(
        self,
        package_dir: str = ".",
        name: Optional[str] = None,
        extra: str = "",
    ) -> "WorkspaceFactory":
        pkg_name = name or (
            Path(package_dir).name if package_dir != "." else "demo"
        )
        content = f'[package]\nname = "{pkg_name}"\nversion = "0.1.0"\n'
        if extra:
            content += "\n" + dedent(extra).strip() + "\n"
        self._files[str(Path(package_dir) / "Cargo.toml")] = content
        return self

    def with_virtual_manifest(self, members: List[str]) -> "WorkspaceFactory":
        quoted = ", ".join(f'"{m}"' for m in members)
        self._files["Cargo.toml"] = f"[workspace]\nmembers = [{quoted}]\n"
        return self

    def with_config(self, content: str) -> "WorkspaceFactory":
        self._files["cratenav.toml"] = dedent(content).strip() + "\n"
        return self

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files[path] = dedent(content).lstrip("\n")
        return self

    def with_raw_file(self, path: str, content: str) -> "WorkspaceFactory":
        self._files[path] = content
        return self

    def build(self) -> Path:
        for rel_path, content in self._files.items():
            file_path = self.root_path / rel_path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        return self.root_path
