"""Plain-data serialization of a ProjectModel.

The output is what a rendering stage consumes: nested dicts and lists of
strings only, with sets sorted so output is stable across runs.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

import yaml

from srcmodel.index.models import Diagnostic, FunctionModel, PackageModel, ProjectModel, TypeModel

if TYPE_CHECKING:
    from srcmodel.index.ops import IndexResult


def _function_to_dict(func: FunctionModel) -> dict[str, Any]:
    data: dict[str, Any] = {
        "parameters": [{"name": p.name, "type": p.type_expr} for p in func.parameters],
        "returns": list(func.returns),
        "file": func.file,
    }
    if func.receiver is not None:
        data["receiver"] = func.receiver
    return data


def _type_to_dict(type_model: TypeModel) -> dict[str, Any]:
    return {
        "kind": type_model.kind.value,
        "fields": dict(type_model.fields),
        "embeds": list(type_model.embeds),
        "methods": {name: _function_to_dict(m) for name, m in type_model.methods.items()},
        "implements": sorted(type_model.implements),
        "file": type_model.file,
    }


def _package_to_dict(pkg: PackageModel) -> dict[str, Any]:
    return {
        "files": list(pkg.files),
        "types": {name: _type_to_dict(t) for name, t in pkg.types.items()},
        "functions": {name: _function_to_dict(f) for name, f in pkg.functions.items()},
    }


def model_to_dict(
    model: ProjectModel,
    diagnostics: list[Diagnostic] | None = None,
) -> dict[str, Any]:
    """Convert a model (and optionally its diagnostics) to plain data."""
    data: dict[str, Any] = {
        "packages": {name: _package_to_dict(pkg) for name, pkg in model.packages.items()},
        "imports": {name: list(paths) for name, paths in model.imports.items()},
        "relations": {key: list(names) for key, names in model.relations.items()},
    }
    if diagnostics is not None:
        data["diagnostics"] = [
            {"file": d.file_path, "message": d.message, "kind": d.kind.value} for d in diagnostics
        ]
    return data


def result_to_dict(result: IndexResult) -> dict[str, Any]:
    data = model_to_dict(result.model, result.diagnostics)
    data["stats"] = asdict(result.stats)
    if result.run_id:
        data["run_id"] = result.run_id
    return data


def dump_json(result: IndexResult, *, indent: int | None = 2) -> str:
    return json.dumps(result_to_dict(result), indent=indent)


def dump_yaml(result: IndexResult) -> str:
    return yaml.safe_dump(result_to_dict(result), sort_keys=False, default_flow_style=False)
