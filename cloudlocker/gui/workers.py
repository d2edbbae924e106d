# cloudlocker/gui/workers.py
"""
Run blocking API calls off the UI thread. Results come back through Qt
signals, which Qt delivers on the thread that owns the receiver.
"""
from __future__ import annotations

from typing import Callable, Optional

from PyQt5.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from ..logutil import get_logger

log = get_logger("gui.workers")

_active: set = set()


class _Signals(QObject):
	done = pyqtSignal(object)
	failed = pyqtSignal(object)
	progress = pyqtSignal(int, int)


class Task(QRunnable):
	def __init__(self, fn: Callable, *args, with_progress: bool = False, **kwargs):
		super().__init__()
		self.fn, self.args, self.kwargs = fn, args, kwargs
		self.signals = _Signals()
		if with_progress:
			self.kwargs["on_progress"] = self.signals.progress.emit

	def run(self):
		try:
			res = self.fn(*self.args, **self.kwargs)
		except Exception as e:
			log.exception("background task failed")
			self.signals.failed.emit(e)
			return
		self.signals.done.emit(res)


def run_async(fn: Callable, *args,
			  on_done: Optional[Callable] = None,
			  on_error: Optional[Callable] = None,
			  on_progress: Optional[Callable[[int, int], None]] = None) -> Task:
	task = Task(fn, *args, with_progress=on_progress is not None)
	_active.add(task)

	def _finish(cb, value):
		_active.discard(task)
		if cb:
			cb(value)

	task.signals.done.connect(lambda res: _finish(on_done, res))
	task.signals.failed.connect(lambda e: _finish(on_error, e))
	if on_progress:
		task.signals.progress.connect(on_progress)
	QThreadPool.globalInstance().start(task)
	return task
