from __future__ import annotations

import string
from typing import Dict, List, Optional

REGISTER_NAMES = string.ascii_lowercase
REGISTER_COUNT = len(REGISTER_NAMES)


def is_register_name(name: str) -> bool:
    return len(name) == 1 and name in REGISTER_NAMES


def register_index(name: str) -> int:
    """Map ``'a'``..``'z'`` to ``0``..``25``."""
    return ord(name) - ord("a")


class RegisterBank:
    """26 integer slots addressed by lowercase letter.

    A slot holds ``None`` until the first `store`; unset is a distinct
    state from holding ``0``.
    """

    __slots__ = ("_slots",)

    def __init__(self):
        self._slots: List[Optional[int]] = [None] * REGISTER_COUNT

    def store(self, name: str, value: int) -> None:
        self._slots[register_index(name)] = value

    def load(self, name: str) -> Optional[int]:
        return self._slots[register_index(name)]

    def is_set(self, name: str) -> bool:
        return self.load(name) is not None

    def snapshot(self) -> Dict[str, int]:
        """Return only the registers that currently hold a value."""
        return {
            name: value
            for name, value in zip(REGISTER_NAMES, self._slots)
            if value is not None
        }

    def __repr__(self) -> str:
        return f"RegisterBank({self.snapshot()!r})"


__all__ = [
    "REGISTER_COUNT",
    "REGISTER_NAMES",
    "RegisterBank",
    "is_register_name",
    "register_index",
]
