from __future__ import annotations

from typing import Dict, Mapping, Optional


class LabelTable:
    """Label name to instruction index, rebindable at compile and run time."""

    __slots__ = ("_targets",)

    def __init__(self, targets: Optional[Mapping[str, int]] = None):
        self._targets: Dict[str, int] = dict(targets or {})

    def bind(self, name: str, index: int) -> None:
        self._targets[name] = index

    def resolve(self, name: str) -> Optional[int]:
        return self._targets.get(name)

    def copy(self) -> "LabelTable":
        return LabelTable(self._targets)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._targets)

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LabelTable):
            return self._targets == other._targets
        if isinstance(other, Mapping):
            return self._targets == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"LabelTable({self._targets!r})"


__all__ = ["LabelTable"]
