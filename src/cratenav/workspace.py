import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from cratenav.config import CARGO_MANIFEST, NavConfig
from cratenav.hir import CfgOptions, Change, CrateSpec

log = logging.getLogger(__name__)

# Directories that never contain crate sources.
EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".idea",
    ".vscode",
    ".cargo",
    "target",
    "node_modules",
    "__pycache__",
}


def find_project_root(start_dir: Path) -> Path:
    """
    Walks upwards to the outermost directory holding a Cargo.toml, so that
    a package inside a Cargo workspace resolves to the workspace root.
    Falls back to `start_dir`.
    """
    current = start_dir.resolve()
    found: Optional[Path] = None
    while True:
        if (current / CARGO_MANIFEST).is_file():
            found = current
        if (current / ".git").is_dir() or current.parent == current:
            break
        current = current.parent
    return found or start_dir.resolve()


class Workspace:
    def __init__(self, root_path: Path, config: Optional[NavConfig] = None):
        self.root_path = root_path.resolve()
        self.config = config or NavConfig()
        self._excluded = EXCLUDED_DIRS | set(self.config.exclude)
        # 'my-crate' -> [<root>/my-crate/src/lib.rs, <root>/my-crate/src/main.rs]
        self.package_roots: Dict[str, List[Path]] = {}
        self._discover_packages()

    def _is_excluded(self, path: Path) -> bool:
        rel_parts = path.relative_to(self.root_path).parts
        return any(part in self._excluded for part in rel_parts)

    def _discover_packages(self) -> None:
        for manifest_path in sorted(self.root_path.glob(f"**/{CARGO_MANIFEST}")):
            if self._is_excluded(manifest_path):
                continue
            try:
                with manifest_path.open("rb") as f:
                    manifest = tomllib.load(f)

                pkg_root = manifest_path.parent
                roots = self._find_crate_roots(pkg_root, manifest)
                if roots:
                    name = manifest.get("package", {}).get("name", pkg_root.name)
                    self.package_roots[name] = roots
            except Exception as e:
                log.warning(f"Could not process {manifest_path}: {e}")

    def _find_crate_roots(self, pkg_root: Path, manifest: Dict[str, Any]) -> List[Path]:
        if "package" not in manifest:
            # A virtual workspace manifest declares no crates of its own.
            return []

        candidates: List[Path] = []
        lib = manifest.get("lib", {})
        candidates.append(pkg_root / lib.get("path", "src/lib.rs"))

        for bin_target in manifest.get("bin", []):
            if "path" in bin_target:
                candidates.append(pkg_root / bin_target["path"])
        candidates.append(pkg_root / "src" / "main.rs")

        bin_dir = pkg_root / "src" / "bin"
        if bin_dir.is_dir():
            candidates.extend(sorted(bin_dir.glob("*.rs")))
            candidates.extend(sorted(bin_dir.glob("*/main.rs")))

        roots: List[Path] = []
        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved.is_file() and resolved not in roots:
                roots.append(resolved)
        return roots

    def crate_roots(self) -> List[Path]:
        if self.config.roots:
            return [(self.root_path / r).resolve() for r in self.config.roots]

        roots = [root for roots in self.package_roots.values() for root in roots]
        if roots:
            return roots

        # No manifests: accept a bare `lib.rs`/`main.rs` layout.
        for candidate in ("src/lib.rs", "src/main.rs", "lib.rs", "main.rs"):
            path = self.root_path / candidate
            if path.is_file():
                roots.append(path.resolve())
        return roots

    def iter_source_files(self) -> Iterator[Path]:
        for path in sorted(self.root_path.rglob("*.rs")):
            if path.is_file() and not self._is_excluded(path):
                yield path

    def virtual_path(self, path: Path) -> str:
        """The database path of a file: `/`-rooted and relative to the workspace."""
        return "/" + path.resolve().relative_to(self.root_path).as_posix()

    def build_change(self, cfg_options: Optional[CfgOptions] = None) -> Change:
        change = Change()
        for path in self.iter_source_files():
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                text = path.read_text(encoding="utf-8", errors="replace")
            change.set_file_text(self.virtual_path(path), text)

        crates: List[CrateSpec] = []
        for root in self.crate_roots():
            if not root.is_file():
                log.warning(f"Crate root {root} does not exist; skipping")
                continue
            if not root.is_relative_to(self.root_path) or self._is_excluded(root):
                log.warning(f"Crate root {root} is outside the workspace; skipping")
                continue
            crates.append(
                CrateSpec(
                    root_path=self.virtual_path(root),
                    cfg_options=cfg_options or CfgOptions(),
                    display_name=root.relative_to(self.root_path).as_posix(),
                )
            )
        change.set_crates(crates)
        return change
