from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence


@dataclass
class VMStateSnapshot:
    pc: int
    halted: bool
    steps: int
    queue: Sequence[int]
    registers: Mapping[str, int]
    labels: Mapping[str, int]
    output: Optional[str] = None


__all__ = ["VMStateSnapshot"]
