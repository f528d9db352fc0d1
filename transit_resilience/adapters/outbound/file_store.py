"""
File Store Adapter

Local filesystem output for scenario reports.
"""

import json
import math
import os
from typing import Dict, Any


def _json_safe(value: Any) -> Any:
    """Replace infinite floats (unreachable routes) with None."""
    if isinstance(value, float) and (math.isinf(value) or math.isnan(value)):
        return None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


class LocalFileStore:
    """Reads and writes JSON documents on the local filesystem."""

    def read_json(self, path: str) -> Dict[str, Any]:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def write_json(self, path: str, data: Dict[str, Any]) -> str:
        """Write data as JSON to file. Returns the written path."""
        self.makedirs(os.path.dirname(path))
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(_json_safe(data), f, indent=2, default=str, ensure_ascii=False)
        return path

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def makedirs(self, path: str) -> None:
        """Create directory and parents if they don't exist."""
        if path:
            os.makedirs(path, exist_ok=True)
