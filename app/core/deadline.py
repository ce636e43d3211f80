# app/core/deadline.py

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class DeadlineExceeded(TimeoutError):
    def __init__(self, action: str) -> None:
        super().__init__(f"prazo excedido: {action}")
        self.action = action


class Deadline:
    """
    Prazo absoluto (relógio monotônico) para uma operação de I/O.

    Um prazo filho nunca passa do prazo do pai: se o pai expira antes,
    vale o do pai. Sem expiração (None) significa sem limite.
    """

    def __init__(self, expires_at: Optional[float] = None) -> None:
        self.expires_at = expires_at

    @classmethod
    def after(cls, timeout: float) -> "Deadline":
        return cls(time.monotonic() + timeout)

    def child(self, timeout: float) -> "Deadline":
        local = time.monotonic() + timeout
        if self.expires_at is None:
            return Deadline(local)
        return Deadline(min(self.expires_at, local))

    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    def check(self, action: str) -> None:
        if self.expired:
            raise DeadlineExceeded(action)


async def run_with_deadline(awaitable: Awaitable[T], deadline: Deadline, action: str) -> T:
    """Aguarda `awaitable` até o prazo; ao expirar, cancela só ela."""
    try:
        return await asyncio.wait_for(awaitable, timeout=deadline.remaining())
    except asyncio.TimeoutError as e:
        raise DeadlineExceeded(action) from e
