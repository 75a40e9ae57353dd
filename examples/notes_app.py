"""Small notes API served with binder.

    python examples/notes_app.py
    curl 'localhost:8080/notes?page=1&tags=home,todo'
    curl localhost:8080/note/1
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import binder
from binder import Error, Json, param

NoteId = int


@dataclass
class Note:
    id: NoteId
    title: str
    body: str
    tags: list[str] = field(default_factory=list)


@dataclass
class NoteFilter:
    tags: list[str] = param("tags", default_factory=list)
    title: Optional[str] = param("title", default=None)


NOTES: dict[NoteId, Note] = {
    1: Note(1, "groceries", "milk, eggs", ["home"]),
    2: Note(2, "backlog", "fix the fence", ["home", "todo"]),
}


def list_notes(page: int, per_page: binder.UInt, filters: NoteFilter) -> Json:
    notes = [
        n for n in NOTES.values()
        if all(t in n.tags for t in filters.tags)
        and (filters.title is None or filters.title in n.title)
    ]
    size = per_page or 20
    start = max(page - 1, 0) * size
    return Json({"page": page, "notes": notes[start:start + size]})


def get_note(note_id: NoteId) -> Json | Error:
    note = NOTES.get(note_id)
    if note is None:
        return Error(404, "not found")
    return Json(note)


HANDLERS = {
    "/notes": binder.wrap(list_notes, "page", "per_page"),
    "/note": binder.action_handler(get_note, "id"),
}


if __name__ == "__main__":
    binder.serve(HANDLERS)
