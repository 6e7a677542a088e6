"""DotDict - dict with attribute access, used for decoded API payloads.

    workspace = await client.workspaces.get("w1")
    workspace.name      # same as workspace["name"]
"""

from __future__ import annotations

from typing import Any


class DotDict(dict):
    """Dict that supports attribute access (dot notation) in addition to bracket notation."""

    def __getattr__(self, key: str) -> Any:
        try:
            return self[key]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'") from None

    def __setattr__(self, key: str, value: Any) -> None:
        self[key] = value

    def __delattr__(self, key: str) -> None:
        try:
            del self[key]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'") from None

    def __repr__(self) -> str:
        return f"DotDict({super().__repr__()})"


def wrap_json(value: Any) -> Any:
    """Recursively convert decoded JSON objects into DotDicts."""
    if isinstance(value, dict):
        return DotDict({key: wrap_json(item) for key, item in value.items()})
    if isinstance(value, list):
        return [wrap_json(item) for item in value]
    return value
