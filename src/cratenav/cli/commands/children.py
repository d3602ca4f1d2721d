import json
from pathlib import Path
from typing import List, Optional

import typer

from cratenav.common import L, bus, cratenav_operator as nexus
from cratenav.ide import Analysis
from cratenav.spec import Cancelled, ConfigError, FilePosition, NavigationTarget
from cratenav.syntax import LineCol
from cratenav.workspace import find_project_root
from cratenav.cli.factories import make_host


def _resolve_offset(
    analysis: Analysis,
    file_id: int,
    path: Path,
    offset: Optional[int],
    line: Optional[int],
    col: Optional[int],
) -> int:
    text_len = len(analysis.file_text(file_id))
    if offset is not None and line is None and col is None:
        return max(0, min(offset, text_len))
    if offset is None and line is not None and col is not None:
        line_index = analysis.file_line_index(file_id)
        if not 1 <= line <= line_index.line_count or col < 1:
            bus.error(L.children.error.line_out_of_range, line=line, col=col, path=path)
            raise typer.Exit(code=1)
        return line_index.offset(LineCol(line - 1, col - 1))

    bus.error(L.children.error.position)
    raise typer.Exit(code=1)


def _to_json(analysis: Analysis, target: NavigationTarget) -> dict:
    focus = target.focus_or_full_range()
    line_col = analysis.file_line_index(target.file_id).line_col(focus.start)
    return {
        "path": analysis.file_path(target.file_id).lstrip("/"),
        "name": target.name,
        "line": line_col.line + 1,
        "col": line_col.col + 1,
        "full_range": [target.full_range.start, target.full_range.end],
        "focus_range": (
            [target.focus_range.start, target.focus_range.end]
            if target.focus_range is not None
            else None
        ),
    }


def children_command(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help=nexus(L.cli.argument.file.help),
    ),
    offset: Optional[int] = typer.Option(
        None, "--offset", min=0, help=nexus(L.cli.option.offset.help)
    ),
    line: Optional[int] = typer.Option(None, "--line", help=nexus(L.cli.option.line.help)),
    col: Optional[int] = typer.Option(None, "--col", help=nexus(L.cli.option.col.help)),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        exists=True,
        file_okay=False,
        dir_okay=True,
        help=nexus(L.cli.option.root.help),
    ),
    cfg: List[str] = typer.Option([], "--cfg", help=nexus(L.cli.option.cfg.help)),
    as_json: bool = typer.Option(False, "--json", help=nexus(L.cli.option.json.help)),
):
    root_path = (root or find_project_root(file.parent)).resolve()
    file_path = file.resolve()

    # 1. Load the workspace
    if not as_json:
        bus.info(L.children.run.loading, root=root_path)
    try:
        host, workspace = make_host(root_path, extra_cfg=cfg)
    except ConfigError as e:
        bus.error(L.error.config, error=str(e))
        raise typer.Exit(code=1)

    analysis = host.analysis()
    bus.debug(
        L.children.run.loaded,
        files=len(list(analysis.snapshot.files())),
        crates=len(analysis.snapshot.crate_ids()),
    )

    if not file_path.is_relative_to(workspace.root_path):
        bus.error(L.children.error.not_in_workspace, path=file, root=root_path)
        raise typer.Exit(code=1)
    file_id = analysis.file_id(workspace.virtual_path(file_path))
    if file_id is None:
        bus.error(L.children.error.not_in_workspace, path=file, root=root_path)
        raise typer.Exit(code=1)

    # 2. Run the query
    position = FilePosition(
        file_id, _resolve_offset(analysis, file_id, file, offset, line, col)
    )
    try:
        targets = analysis.children_module(position)
    except Cancelled:
        bus.error(L.children.error.cancelled)
        raise typer.Exit(code=1)

    # 3. Report
    if as_json:
        typer.echo(
            json.dumps([_to_json(analysis, t) for t in targets], indent=2)
        )
        return

    if not targets:
        bus.info(L.children.run.none)
        return

    for target in targets:
        entry = _to_json(analysis, target)
        typer.echo(nexus(L.children.target, **entry))
    bus.success(L.children.run.found, count=len(targets))
