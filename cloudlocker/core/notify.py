# cloudlocker/core/notify.py
from __future__ import annotations

from typing import Callable

SUCCESS = "success"
INFO = "info"
WARNING = "warning"
ERROR = "error"

# notify(level, message): transient, user-facing, never persisted
Notifier = Callable[[str, str], None]


def null_notify(level: str, message: str) -> None:
	pass
