"""Error type shared by every compiler stage."""

from __future__ import annotations


class CompileError(Exception):
    """A diagnosed failure, tagged with a numeric id and the object it concerns."""

    def __init__(self, id: int, obj: str, message: str) -> None:
        super().__init__(id, obj, message)
        self.id = id
        self.object = obj
        self.message = message

    def __str__(self) -> str:
        return f"[{self.object}] error {self.id}: {self.message}"