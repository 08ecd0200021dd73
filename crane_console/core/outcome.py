from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

NoticeKind = Literal["positive", "negative"]


@dataclass(frozen=True)
class Success:
    """Dispatch completed; `summary` echoes what was sent."""

    summary: str
    source: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    reason: str

    @property
    def ok(self) -> bool:
        return False


CommandOutcome = Union[Success, Failure]


@dataclass(frozen=True)
class Notice:
    """Structured input for whatever renders operator feedback (toast, log, ...)."""

    title: str
    message: str
    kind: NoticeKind = "positive"
