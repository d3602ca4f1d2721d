from textwrap import dedent
from typing import Dict, List, Optional

from cratenav.hir import CfgOptions, Change, CrateSpec, DefMap, RootDatabase, Snapshot
from cratenav.hir.def_map import FileSource, InlineSource


def _snapshot(files: Dict[str, str], root: str = "/src/lib.rs", cfg: Optional[List[str]] = None) -> Snapshot:
    change = Change()
    for path, text in files.items():
        change.set_file_text(path, dedent(text))
    change.set_crates(
        [CrateSpec(root_path=root, cfg_options=CfgOptions.from_specs(cfg or []))]
    )
    db = RootDatabase()
    db.apply_change(change)
    return db.snapshot()


def _tree(def_map: DefMap, local_id: int = DefMap.ROOT) -> Dict[str, dict]:
    return {
        def_map[child].name: _tree(def_map, child)
        for child in def_map.children(local_id)
    }


def test_collects_file_and_inline_modules():
    snapshot = _snapshot(
        {
            "/src/lib.rs": """
                mod a;
                mod b;
                mod inline { mod c; }
            """,
            "/src/a.rs": "mod nested;",
            "/src/a/nested.rs": "",
            "/src/b/mod.rs": "mod deep;",
            "/src/b/deep.rs": "",
            "/src/inline/c.rs": "",
        }
    )
    def_map = snapshot.crate_def_map(0)

    assert _tree(def_map) == {
        "a": {"nested": {}},
        "b": {"deep": {}},
        "inline": {"c": {}},
    }
    inline = def_map.child_by_name(DefMap.ROOT, "inline")
    assert isinstance(def_map[inline].source, InlineSource)
    assert isinstance(def_map[DefMap.ROOT].source, FileSource)


def test_name_rs_is_preferred_over_mod_rs():
    snapshot = _snapshot(
        {"/src/lib.rs": "mod a;", "/src/a.rs": "", "/src/a/mod.rs": ""}
    )
    def_map = snapshot.crate_def_map(0)
    a = def_map.child_by_name(DefMap.ROOT, "a")

    assert snapshot.file_path(def_map[a].source.file_id) == "/src/a.rs"


def test_unresolved_declarations_are_skipped():
    snapshot = _snapshot({"/src/lib.rs": "mod missing;\nmod present;", "/src/present.rs": ""})

    assert _tree(snapshot.crate_def_map(0)) == {"present": {}}


def test_cfg_disabled_declarations_are_skipped():
    files = {
        "/src/lib.rs": """
            #[cfg(test)]
            mod tests;
            #[cfg(not(test))]
            mod prod;
            mod gated { #![cfg(feature = "x")] }
        """,
        "/src/tests.rs": "",
        "/src/prod.rs": "",
    }

    assert _tree(_snapshot(files).crate_def_map(0)) == {"prod": {}}
    assert _tree(_snapshot(files, cfg=["test", 'feature="x"']).crate_def_map(0)) == {
        "tests": {},
        "gated": {},
    }


def test_inner_cfg_of_module_file_disables_it():
    snapshot = _snapshot({"/src/lib.rs": "mod a;", "/src/a.rs": "#![cfg(unix)]\n"})

    assert _tree(snapshot.crate_def_map(0)) == {}


def test_path_attribute_overrides_file_lookup():
    snapshot = _snapshot(
        {
            "/src/lib.rs": """
                #[path = "impls/linux.rs"]
                mod sys;
            """,
            "/src/impls/linux.rs": "mod helper;",
            "/src/impls/helper.rs": "",
        }
    )
    def_map = snapshot.crate_def_map(0)
    sys = def_map.child_by_name(DefMap.ROOT, "sys")

    assert snapshot.file_path(def_map[sys].source.file_id) == "/src/impls/linux.rs"
    # A path-attributed file owns its directory, like a mod.rs.
    assert _tree(def_map) == {"sys": {"helper": {}}}


def test_duplicate_declarations_share_one_module():
    snapshot = _snapshot(
        {
            "/src/lib.rs": """
                #[cfg(unix)]
                mod imp;
                #[cfg(not(windows))]
                mod imp;
            """,
            "/src/imp.rs": "",
        },
        cfg=["unix"],
    )
    def_map = snapshot.crate_def_map(0)
    imp = def_map.child_by_name(DefMap.ROOT, "imp")

    assert len(def_map.children(DefMap.ROOT)) == 1
    assert len(def_map[imp].declarations) == 2


def test_a_file_is_loaded_at_most_once():
    snapshot = _snapshot(
        {
            "/src/lib.rs": """
                mod a;
                #[path = "a.rs"]
                mod again;
            """,
            "/src/a.rs": "",
        }
    )

    assert _tree(snapshot.crate_def_map(0)) == {"a": {}}


def test_lookups_by_file_and_declaration():
    snapshot = _snapshot({"/src/lib.rs": "mod a { mod b {} }"})
    def_map = snapshot.crate_def_map(0)
    lib = snapshot.file_id("/src/lib.rs")
    a = def_map.child_by_name(DefMap.ROOT, "a")
    b = def_map.child_by_name(a, "b")

    assert def_map.modules_for_file(lib) == [DefMap.ROOT, a, b]
    assert def_map.path_to_root(b) == [b, a, DefMap.ROOT]
    (site,) = def_map[b].declarations
    assert def_map.module_for_declaration(site) == b
    assert len(list(def_map.modules())) == 3


def test_path_attribute_inside_inline_module_uses_its_directory():
    snapshot = _snapshot(
        {
            "/src/lib.rs": 'mod inner { #[path = "x.rs"] mod renamed; }',
            "/src/inner/x.rs": "",
        }
    )
    def_map = snapshot.crate_def_map(0)
    inner = def_map.child_by_name(DefMap.ROOT, "inner")
    renamed = def_map.child_by_name(inner, "renamed")

    assert snapshot.file_path(def_map[renamed].source.file_id) == "/src/inner/x.rs"
