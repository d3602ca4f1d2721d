from pathlib import Path
from typing import List, Optional, Tuple

from cratenav.config import NavConfig, load_config_from_path
from cratenav.ide import AnalysisHost
from cratenav.workspace import Workspace


def make_host(
    root_path: Path,
    config: Optional[NavConfig] = None,
    extra_cfg: Optional[List[str]] = None,
) -> Tuple[AnalysisHost, Workspace]:
    """Loads every crate of the workspace into a fresh analysis host."""
    config = config or load_config_from_path(root_path)
    workspace = Workspace(root_path, config)
    host = AnalysisHost()
    host.apply_change(workspace.build_change(config.cfg_options(extra_cfg)))
    return host, workspace
