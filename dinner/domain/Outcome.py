"""Explicit success/failure result returned by every core operation."""
from typing import Any, Optional


class Outcome:
    def __init__(self, ok: bool, error: Optional[str] = None, value: Any = None, id: Optional[str] = None):
        self.ok = ok
        self.error = error
        self.value = value
        self.id = id

    @classmethod
    def success(cls, value: Any = None, *, id: Optional[str] = None) -> "Outcome":
        return cls(True, value=value, id=id)

    @classmethod
    def failure(cls, error: str) -> "Outcome":
        return cls(False, error=error or "Unknown error")

    def __bool__(self) -> bool:
        return self.ok

    def __str__(self) -> str:
        return "ok" if self.ok else f"error: {self.error}"

    __repr__ = __str__

    def to_dict(self):
        if not self.ok:
            return {"ok": False, "error": self.error}
        d = {"ok": True}
        if self.id is not None:
            d["id"] = self.id
        return d
