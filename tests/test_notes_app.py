import json
import sys
from pathlib import Path
from types import SimpleNamespace

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "examples"))

import notes_app  # noqa: E402

from conftest import FakeRequest  # noqa: E402


def call(path, params=None, path_vars=None):
    output = SimpleNamespace(status=None, headers={})
    body = notes_app.HANDLERS[path].handle(FakeRequest(params), output, path_vars)
    return output.status, body


def test_list_notes_filters_by_tags():
    status, body = call("/notes", {"page": "1", "tags": "todo"})
    assert status == 200
    assert [n["id"] for n in json.loads(body)["notes"]] == [2]


def test_list_notes_without_filters():
    _, body = call("/notes")
    payload = json.loads(body)
    assert payload["page"] == 0
    assert len(payload["notes"]) == 2


def test_get_note_by_path_segment():
    status, body = call("/note", path_vars={"id": "1"})
    assert status == 200
    assert json.loads(body)["title"] == "groceries"


def test_get_missing_note():
    assert call("/note", {"id": "99"}) == (404, b"not found")
