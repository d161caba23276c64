"""Read fetched JSON payloads from disk and write canonical view models back."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def read_json(path: str | Path) -> Any:
    """Load a JSON payload file. Raises OSError / ValueError on bad input."""
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def dump_models(data: BaseModel | list[BaseModel] | tuple[BaseModel, ...]) -> Any:
    """Wire-shaped (camelCase) plain data for one model or a sequence of them."""
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    return [m.model_dump(by_alias=True) for m in data]


def write_json(path: str | Path, data: BaseModel | list[BaseModel] | tuple[BaseModel, ...]) -> str:
    """Write view models as JSON. Returns the written path."""
    body = json.dumps(dump_models(data), ensure_ascii=False, indent=2, default=str)
    Path(path).write_text(body + "\n", encoding="utf-8")
    return str(path)
