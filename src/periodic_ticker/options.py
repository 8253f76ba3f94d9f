# src/periodic_ticker/options.py

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

UNBOUNDED = -1


@dataclass(slots=True, frozen=True)
class Config:
    """
    Run configuration.

    - immediate: invoke the task once before the first wait
    - limit: max invocations for the whole run (immediate one included);
      0 means never invoke, any negative value means no limit
    """

    immediate: bool = False
    limit: int = UNBOUNDED

    @property
    def bounded(self) -> bool:
        return self.limit >= 0


Option = Callable[[Config], Config]


def with_immediate(value: bool = True) -> Option:
    """Execute the task once right away, before the ticker starts."""
    flag = bool(value)

    def _apply(c: Config) -> Config:
        return replace(c, immediate=flag)

    return _apply


def with_limit(value: int) -> Option:
    """
    Cap the number of executions.

    0 -> no execution at all, negative -> unbounded.
    """
    n = int(value)

    def _apply(c: Config) -> Config:
        return replace(c, limit=n)

    return _apply


def build_config(options: Iterable[Option] = ()) -> Config:
    c = Config()
    for opt in options:
        c = opt(c)
    return c
