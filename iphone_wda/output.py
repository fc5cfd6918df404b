"""Shared output utilities used by CLI and command modules."""

from __future__ import annotations

import dataclasses
import json
import sys
from enum import Enum

from rich.console import Console
from rich.json import JSON as RichJSON

console = Console()
err_console = Console(stderr=True)


def to_dict(obj) -> dict:
    """Convert a payload dataclass to a dict, dropping the raw JSON text."""
    d = {}
    for f in dataclasses.fields(obj):
        if f.name == "raw":
            continue
        d[f.name] = _plain(getattr(obj, f.name))
    return d


def _plain(value):
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, Enum):
        return {"code": value.value, "description": str(value)} if isinstance(value.value, int) else value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def output_json(data: dict | list):
    """Standard JSON output for agent consumption."""
    if sys.stdout.isatty():
        console.print(RichJSON(json.dumps(data, indent=2, default=str)))
    else:
        print(json.dumps(data, default=str))


def output_error(message: str):
    """Report a failure as JSON and exit non-zero."""
    output_json({"error": message})
    raise SystemExit(1)
