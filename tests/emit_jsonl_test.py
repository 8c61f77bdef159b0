import json

from thread_splitter.adapters import emit_jsonl
from thread_splitter.core import segments_from_payload


def _read(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_rows_carry_index_and_length():
    assert emit_jsonl.rows(["a", "bb"]) == [
        {"index": 1, "text": "a", "length": 1},
        {"index": 2, "text": "bb", "length": 2},
    ]


def test_write_creates_parent_dirs(tmp_path):
    out = tmp_path / "nested" / "thread.jsonl"
    emit_jsonl.write(["1/2 Café au lait.", "2/2 Fin."], out)
    assert [r["text"] for r in _read(out)] == ["1/2 Café au lait.", "2/2 Fin."]
    assert "Café" in out.read_text(encoding="utf-8")


def test_write_without_path_is_noop(tmp_path):
    emit_jsonl.write(["a"], None)
    assert list(tmp_path.iterdir()) == []


def test_write_segments_document(tmp_path):
    out = tmp_path / "out.jsonl"
    payload = {"type": "segments", "segments": ["one", "two"]}
    emit_jsonl.write(segments_from_payload(payload), out)
    assert [r["index"] for r in _read(out)] == [1, 2]
