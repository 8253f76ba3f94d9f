"""
Periodic task driver.

Components:
- task.py: Task, new(), run() / run_async() and the execution loop
- options.py: Config + with_immediate() / with_limit()
- cancellation.py: CancellationToken (caller-owned stop signal)
- ticker.py: single-slot periodic signal (thread and asyncio flavours)
- errors.py: error taxonomy

Example:

    task = new(poll)
    with CancellationToken.with_timeout(30) as token:
        task.run(token, 1.0, with_immediate(True), with_limit(5))
"""

from .cancellation import CancellationToken
from .errors import (
    CancellationError,
    Canceled,
    DeadlineExceeded,
    InvalidArgumentError,
    NilFunctionError,
    NonPositiveIntervalError,
    TickerError,
)
from .options import UNBOUNDED, Config, Option, build_config, with_immediate, with_limit
from .task import Task, new, run, run_async

__all__ = [
    "UNBOUNDED",
    "CancellationError",
    "CancellationToken",
    "Canceled",
    "Config",
    "DeadlineExceeded",
    "InvalidArgumentError",
    "NilFunctionError",
    "NonPositiveIntervalError",
    "Option",
    "Task",
    "TickerError",
    "build_config",
    "new",
    "run",
    "run_async",
    "with_immediate",
    "with_limit",
]
