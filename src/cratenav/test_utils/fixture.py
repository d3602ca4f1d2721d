"""
A compact text format for describing a small crate inside a single string.

    //- /lib.rs cfg:test,feature=serde
    mod foo;
    $0
    //- /foo.rs
    mod bar;

`//- /path` starts a new file; the first file is the crate root and its
`cfg:` list becomes the crate's cfg options. `$0` marks the cursor.
A `//^^^` comment marks the columns under its carets on the previous
non-annotation line, so expected ranges can be written next to the code.
"""

import re
from dataclasses import dataclass, field
from textwrap import dedent
from typing import List, Optional, Tuple

from cratenav.hir import CfgOptions, Change, CrateSpec
from cratenav.ide import Analysis, AnalysisHost
from cratenav.spec import FileRange, FilePosition, FixtureError, TextRange

CURSOR_MARKER = "$0"
_HEADER = re.compile(r"^//-\s+(?P<path>\S+)(?P<meta>.*)$")
_ANNOTATION = re.compile(r"//(?P<carets>\^+)(?P<label>.*)$")


@dataclass
class FixtureFile:
    path: str
    text: str
    cfg: List[str] = field(default_factory=list)


@dataclass
class ParsedFixture:
    files: List[FixtureFile]
    # (index into `files`, offset)
    cursor: Optional[Tuple[int, int]] = None


def _parse_meta(meta: str, header: str) -> List[str]:
    cfg: List[str] = []
    for chunk in meta.split():
        if not chunk.startswith("cfg:"):
            raise FixtureError(f"Unknown fixture metadata '{chunk}' in: {header}")
        cfg.extend(spec for spec in chunk[len("cfg:") :].split(",") if spec)
    return cfg


def parse_fixture(fixture: str) -> ParsedFixture:
    text = dedent(fixture).strip("\n")
    if not text.startswith("//-"):
        text = "//- /main.rs\n" + text

    files: List[FixtureFile] = []
    for line in text.splitlines(keepends=True):
        match = _HEADER.match(line.rstrip("\r\n"))
        if match:
            files.append(
                FixtureFile(match["path"], "", _parse_meta(match["meta"], line.strip()))
            )
        else:
            files[-1].text += line

    paths = [f.path for f in files]
    if len(set(paths)) != len(paths):
        raise FixtureError(f"Duplicate file in fixture: {paths}")

    parsed = ParsedFixture(files)
    for index, fixture_file in enumerate(files):
        count = fixture_file.text.count(CURSOR_MARKER)
        if count == 0:
            continue
        if count > 1 or parsed.cursor is not None:
            raise FixtureError("A fixture may contain at most one cursor marker")
        offset = fixture_file.text.index(CURSOR_MARKER)
        fixture_file.text = fixture_file.text.replace(CURSOR_MARKER, "")
        parsed.cursor = (index, offset)
    return parsed


def extract_annotations(text: str) -> List[Tuple[TextRange, str]]:
    """
    Collects `//^^^ label` annotations, in order of appearance.

    Each annotation points at the same columns of the closest preceding
    line that is not itself only an annotation.
    """
    result: List[Tuple[TextRange, str]] = []
    prev_line_start: Optional[int] = None
    line_start = 0
    for line in text.splitlines(keepends=True):
        match = _ANNOTATION.search(line)
        if match:
            if prev_line_start is None:
                raise FixtureError(f"Annotation without a line to annotate: {line!r}")
            start = prev_line_start + match.start("carets")
            end = start + len(match["carets"])
            result.append((TextRange(start, end), match["label"].strip()))
        if not match or line[: match.start()].strip():
            prev_line_start = line_start
        line_start += len(line)
    return result


def _load(parsed: ParsedFixture) -> Tuple[AnalysisHost, List[int]]:
    change = Change()
    for fixture_file in parsed.files:
        change.set_file_text(fixture_file.path, fixture_file.text)
    root = parsed.files[0]
    change.set_crates(
        [CrateSpec(root_path=root.path, cfg_options=CfgOptions.from_specs(root.cfg))]
    )

    host = AnalysisHost()
    host.apply_change(change)
    snapshot = host.analysis().snapshot
    file_ids = [snapshot.file_id(f.path) for f in parsed.files]
    return host, file_ids


def with_position(fixture: str) -> Tuple[AnalysisHost, FilePosition]:
    parsed = parse_fixture(fixture)
    if parsed.cursor is None:
        raise FixtureError("Fixture has no cursor marker")
    host, file_ids = _load(parsed)
    index, offset = parsed.cursor
    return host, FilePosition(file_ids[index], offset)


def annotations(
    fixture: str,
) -> Tuple[Analysis, FilePosition, List[Tuple[FileRange, str]]]:
    parsed = parse_fixture(fixture)
    if parsed.cursor is None:
        raise FixtureError("Fixture has no cursor marker")
    host, file_ids = _load(parsed)

    expected: List[Tuple[FileRange, str]] = []
    for file_id, fixture_file in zip(file_ids, parsed.files):
        for text_range, label in extract_annotations(fixture_file.text):
            expected.append((FileRange(file_id, text_range), label))

    index, offset = parsed.cursor
    return host.analysis(), FilePosition(file_ids[index], offset), expected


def check_children_module(fixture: str) -> None:
    analysis, position, expected = annotations(fixture)
    targets = analysis.children_module(position)

    actual = [FileRange(t.file_id, t.focus_or_full_range()) for t in targets]
    assert actual == [file_range for file_range, _ in expected]
