from __future__ import annotations

from pprint import pformat
from typing import Any, Iterable, TextIO

from pydantic import BaseModel

RED = "1;31"
YELLOW = "1;33"
GREEN = "1;32"


def _plain(item: Any) -> Any:
    if isinstance(item, BaseModel):
        return item.model_dump(by_alias=True)
    return item


def dump_section(title: str, items: Iterable[Any], color: str, out: TextIO) -> None:
    """Write a colored header followed by a pretty-printed result list."""

    rows = [_plain(item) for item in items]
    out.write(f"\n\n\033[{color}m{title}\033[0m\n")
    out.write(pformat(rows, width=100, sort_dicts=False))
    out.write("\n")
