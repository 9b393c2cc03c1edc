"""Fetch lifecycle states."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchState:
    """
    Immutable snapshot of a binding.

    data is carried through LOADING so a refetch keeps showing the
    previous payload until the new outcome settles.
    """
    status: FetchStatus
    data: Any = None
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @classmethod
    def idle(cls) -> "FetchState":
        return cls(FetchStatus.IDLE)

    @classmethod
    def loading_from(cls, previous: "FetchState") -> "FetchState":
        return cls(FetchStatus.LOADING, data=previous.data)

    @classmethod
    def resolved(cls, payload: Any) -> "FetchState":
        return cls(FetchStatus.RESOLVED, data=payload)

    @classmethod
    def failed(cls, message: str) -> "FetchState":
        return cls(FetchStatus.FAILED, error=message)


def describe_error(exc: BaseException) -> str:
    """Human-readable message for a failed fetch."""
    return str(exc) or exc.__class__.__name__
