from .cfg import CfgAll, CfgAny, CfgAtom, CfgExpr, CfgInvalid, CfgNot, CfgOptions, parse_cfg
from .db import Change, CrateData, CrateSpec, RootDatabase, Snapshot, normalize_path
from .def_map import DefCollector, DefMap
from .semantics import InFile, Module, Semantics

__all__ = [
    "CfgAll",
    "CfgAny",
    "CfgAtom",
    "CfgExpr",
    "CfgInvalid",
    "CfgNot",
    "CfgOptions",
    "parse_cfg",
    "Change",
    "CrateData",
    "CrateSpec",
    "RootDatabase",
    "Snapshot",
    "normalize_path",
    "DefCollector",
    "DefMap",
    "InFile",
    "Module",
    "Semantics",
]
