"""Decode hierarchical ``field``/``data``/``children`` JSON listings."""

from __future__ import annotations

import json
from typing import Any, BinaryIO, List

from .exceptions import TreeDecodeError
from .models import TreeEntry

ROOT_KEY = "lscpu"


def _decode_entries(payload: Any, context: str) -> List[TreeEntry]:
    if not isinstance(payload, list):
        raise TreeDecodeError(f"{context}: expected a list of entries")
    entries: List[TreeEntry] = []
    for idx, item in enumerate(payload):
        entry_context = f"{context}[{idx}]"
        if not isinstance(item, dict):
            raise TreeDecodeError(f"{entry_context}: entry must be a mapping")
        label = item.get("field")
        if label is not None and not isinstance(label, str):
            raise TreeDecodeError(f"{entry_context}: 'field' must be a string or null")
        data = item.get("data")
        if data is not None and not isinstance(data, str):
            raise TreeDecodeError(f"{entry_context}: 'data' must be a string or null")
        children_raw = item.get("children")
        children = (
            _decode_entries(children_raw, f"{entry_context}.children")
            if children_raw is not None
            else []
        )
        entries.append(TreeEntry(label=label or "", data=data or "", children=children))
    return entries


def parse_tree(stream: BinaryIO) -> TreeEntry:
    """Read ``stream`` to the end and decode it into a root :class:`TreeEntry`.

    The root carries no label of its own; its children are the top-level
    entries. Stream read errors propagate unchanged.
    """
    raw = stream.read()
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise TreeDecodeError(f"invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise TreeDecodeError("JSON nested too deeply") from exc
    if isinstance(payload, dict):
        if ROOT_KEY not in payload:
            raise TreeDecodeError(f"missing required key '{ROOT_KEY}'")
        payload = payload[ROOT_KEY]
    try:
        children = _decode_entries(payload, ROOT_KEY)
    except RecursionError as exc:
        raise TreeDecodeError("tree nested too deeply") from exc
    return TreeEntry(label="", children=children)
