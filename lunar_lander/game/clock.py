# lunar_lander/game/clock.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional


@dataclass
class PeriodicTask:
    name: str
    period_ms: int
    callback: Callable[[], None]
    elapsed_ms: int = 0
    cancelled: bool = False

    def feed(self, ms: int) -> None:
        """Accumulate time and fire once per whole period elapsed."""
        self.elapsed_ms += ms
        while not self.cancelled and self.elapsed_ms >= self.period_ms:
            self.elapsed_ms -= self.period_ms
            self.callback()


class FixedStepScheduler:
    """
    Cooperative timers driven by one simulated clock.

    Every task is advanced from the same fixed step, in the order it was
    scheduled, so the whole game is reproducible tick for tick. A task
    scheduled or cancelled from inside a callback takes effect from the next
    advance; cancelling by name (or all at once) is how a level is torn down.
    """

    def __init__(self):
        self._tasks: Dict[str, PeriodicTask] = {}
        self.now_ms: int = 0

    def schedule(self, name: str, period_ms: int, callback: Callable[[], None]) -> PeriodicTask:
        if period_ms <= 0:
            raise ValueError(f"period_ms must be > 0, got {period_ms}")
        self.cancel(name)
        task = PeriodicTask(name=name, period_ms=int(period_ms), callback=callback)
        self._tasks[name] = task
        return task

    def cancel(self, name: str) -> bool:
        task = self._tasks.pop(name, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def cancel_all(self, names: Optional[Iterable[str]] = None) -> None:
        for name in list(self._tasks if names is None else names):
            self.cancel(name)

    def is_scheduled(self, name: str) -> bool:
        return name in self._tasks

    @property
    def task_names(self) -> List[str]:
        return list(self._tasks)

    def advance(self, ms: int) -> None:
        self.now_ms += ms
        for task in list(self._tasks.values()):
            if not task.cancelled:
                task.feed(ms)
