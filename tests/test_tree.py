import io
import json

import pytest

from hwreport.exceptions import TreeDecodeError
from hwreport.models import TreeEntry
from hwreport.tree import parse_tree

LSCPU_JSON = {
    "lscpu": [
        {"field": "Architecture:", "data": "x86_64", "children": [
            {"field": "CPU op-mode(s):", "data": "32-bit, 64-bit"},
            {"field": "Byte Order:", "data": "Little Endian"},
        ]},
        {"field": "Caches (sum of all):", "data": None, "children": [
            {"field": "L1d:", "data": "192 KiB (4 instances)"},
        ]},
    ]
}


def _stream(payload) -> io.BytesIO:
    return io.BytesIO(json.dumps(payload).encode("utf-8"))


def test_parse_tree_builds_nested_entries() -> None:
    root = parse_tree(_stream(LSCPU_JSON))
    assert root.label == ""
    assert [entry.label for entry in root.children] == ["Architecture:", "Caches (sum of all):"]
    architecture = root.children[0]
    assert architecture.data == "x86_64"
    assert architecture.children[0] == TreeEntry("CPU op-mode(s):", "32-bit, 64-bit")
    assert root.children[1].data == ""


def test_parse_tree_is_repeatable() -> None:
    assert parse_tree(_stream(LSCPU_JSON)) == parse_tree(_stream(LSCPU_JSON))


def test_parse_tree_accepts_bare_list() -> None:
    root = parse_tree(_stream([{"field": "Model:", "data": "142"}]))
    assert root.children == [TreeEntry("Model:", "142")]


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b'{"other": []}',
        b'{"lscpu": {"field": "x"}}',
        b'{"lscpu": [{"field": 7, "data": "numeric label"}]}',
        b'{"lscpu": [{"field": "x", "data": 3}]}',
        b'{"lscpu": [{"field": "x", "data": "y", "children": "nope"}]}',
    ],
)
def test_parse_tree_rejects_bad_shapes(raw: bytes) -> None:
    with pytest.raises(TreeDecodeError):
        parse_tree(io.BytesIO(raw))


def test_parse_tree_tolerates_missing_labels() -> None:
    raw = b'{"lscpu": [{"data": "orphan"}, {"field": null, "data": "x"}, {"field": "Model:", "data": "142"}]}'
    root = parse_tree(io.BytesIO(raw))
    assert root.children == [
        TreeEntry("", "orphan"),
        TreeEntry("", "x"),
        TreeEntry("Model:", "142"),
    ]


def test_parse_tree_rejects_deep_nesting() -> None:
    depth = 100000
    with pytest.raises(TreeDecodeError):
        parse_tree(io.BytesIO(b"[" * depth + b"]" * depth))
