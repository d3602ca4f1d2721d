from pathlib import Path

from cratenav.config import NavConfig
from cratenav.hir import CfgOptions, RootDatabase
from cratenav.workspace import Workspace, find_project_root


def test_discovers_library_binary_and_extra_bins(workspace_factory):
    root = (
        workspace_factory.with_cargo_toml(name="app")
        .with_source("src/lib.rs", "mod a;")
        .with_source("src/main.rs", "")
        .with_source("src/bin/tool.rs", "")
        .with_source("src/bin/multi/main.rs", "")
        .build()
    )

    workspace = Workspace(root)
    rel = [
        p.relative_to(workspace.root_path).as_posix()
        for p in workspace.package_roots["app"]
    ]

    assert rel == ["src/lib.rs", "src/main.rs", "src/bin/tool.rs", "src/bin/multi/main.rs"]


def test_manifest_paths_are_honoured(workspace_factory):
    root = (
        workspace_factory.with_cargo_toml(
            name="custom",
            extra="""
            [lib]
            path = "lib/root.rs"

            [[bin]]
            name = "cli"
            path = "cli/entry.rs"
            """,
        )
        .with_source("lib/root.rs", "")
        .with_source("cli/entry.rs", "")
        .build()
    )

    workspace = Workspace(root)
    roots = workspace.crate_roots()

    assert [p.relative_to(workspace.root_path).as_posix() for p in roots] == ["lib/root.rs", "cli/entry.rs"]


def test_virtual_workspace_members_are_found(workspace_factory):
    root = (
        workspace_factory.with_virtual_manifest(["crates/a", "crates/b"])
        .with_cargo_toml("crates/a")
        .with_source("crates/a/src/lib.rs", "")
        .with_cargo_toml("crates/b")
        .with_source("crates/b/src/main.rs", "")
        .build()
    )

    workspace = Workspace(root)

    assert sorted(workspace.package_roots) == ["a", "b"]


def test_build_artifacts_and_excluded_dirs_are_ignored(workspace_factory):
    root = (
        workspace_factory.with_cargo_toml(name="app")
        .with_source("src/lib.rs", "")
        .with_raw_file("target/debug/build/out.rs", "")
        .with_raw_file("target/package/Cargo.toml", '[package]\nname = "copy"\n')
        .with_raw_file("vendor/dep/src/lib.rs", "")
        .build()
    )

    workspace = Workspace(root, NavConfig(exclude=["vendor"]))
    sources = [
        p.relative_to(workspace.root_path).as_posix()
        for p in workspace.iter_source_files()
    ]

    assert sources == ["src/lib.rs"]
    assert list(workspace.package_roots) == ["app"]


def test_broken_manifest_is_skipped(workspace_factory, caplog):
    root = (
        workspace_factory.with_raw_file("Cargo.toml", "[package")
        .with_source("src/lib.rs", "")
        .build()
    )

    workspace = Workspace(root)

    assert workspace.package_roots == {}
    assert "Could not process" in caplog.text
    # Without manifests, the conventional layout still yields a crate.
    assert workspace.crate_roots() == [(root / "src/lib.rs").resolve()]


def test_configured_roots_win(workspace_factory):
    root = (
        workspace_factory.with_cargo_toml()
        .with_source("src/lib.rs", "")
        .with_source("examples/demo.rs", "")
        .build()
    )

    workspace = Workspace(root, NavConfig(roots=["examples/demo.rs"]))

    assert workspace.crate_roots() == [(root / "examples/demo.rs").resolve()]


def test_build_change_loads_files_and_crates(workspace_factory, caplog):
    root = (
        workspace_factory.with_cargo_toml()
        .with_source("src/lib.rs", "mod a;")
        .with_source("src/a.rs", "")
        .build()
    )
    workspace = Workspace(root, NavConfig(roots=["src/lib.rs", "src/missing.rs"]))

    db = RootDatabase()
    db.apply_change(workspace.build_change(CfgOptions.from_specs(["test"])))
    snapshot = db.snapshot()

    assert snapshot.file_id("/src/a.rs") is not None
    assert snapshot.crate_ids() == [0]
    assert snapshot.crate_data(0).display_name == "src/lib.rs"
    assert snapshot.crate_data(0).cfg_options == CfgOptions.from_specs(["test"])
    assert "does not exist" in caplog.text


def test_virtual_path(tmp_path: Path):
    workspace = Workspace(tmp_path)

    assert workspace.virtual_path(tmp_path / "src" / "lib.rs") == "/src/lib.rs"


def test_find_project_root_prefers_outermost_manifest(workspace_factory):
    root = (
        workspace_factory.with_virtual_manifest(["member"])
        .with_cargo_toml("member")
        .with_source("member/src/lib.rs", "")
        .with_raw_file(".git/HEAD", "")
        .build()
    )

    assert find_project_root(root / "member" / "src") == root.resolve()
