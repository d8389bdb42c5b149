"""Background task manager on top of a `concurrent.futures` executor.

Used by the host transport, so that network requests never block the GUI thread.
"""

__all__ = ["TaskManager"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)

import concurrent.futures
import threading
import time
import traceback
from typing import Any, Callable, List

from unpythonic.symbol import gensym, gsym
from unpythonic.env import env

# --------------------------------------------------------------------------------
# Background task manager

class TaskManager:
    def __init__(self, name: str, mode: str, executor: concurrent.futures.Executor):
        """Track tasks submitted to `executor`, with co-operative cancellation.

        `name`: Name for this task manager, lowercase with underscores recommended.
                Included in the generated task names, for log messages.
        `mode`: str, one of:
                    "concurrent": Any number of tasks may be in flight.
                    "sequential": Submitting a new task cancels all earlier ones.
        `executor`: Runs the tasks. Can be shared between task managers.
        """
        if mode not in ("concurrent", "sequential"):
            raise ValueError(f"Unknown mode '{mode}'; valid values: 'concurrent', 'sequential'.")

        self.name = name
        self.mode = mode
        self.executor = executor
        self.tasks = {}  # task name (unique) -> (future, env)
        self.lock = threading.RLock()

    def submit(self, function: Callable, env: env, owner: Any = None) -> gsym:
        """Submit a new task.

        `function`: callable, must take one positional argument.
        `env`: `unpythonic.env.env`, passed to `function` as the only argument.

               When `submit` returns, `env` will contain three new attributes:

                   `task_name`: unique name of the task, for log messages.

                   `cancelled`: bool. The `function` must monitor this flag, and exit
                                as soon as conveniently possible if it becomes `True`.
                                A task may be cancelled before it even starts.

                   `owner`: the `owner` argument, see below.

               When the task exits or is cancelled, if `env` has an attribute `done_callback`,
               it is called with `env` as its only argument. The task is removed from this
               manager only after the `done_callback` exits. To return a value from the task,
               stash it into `env`, and read it in the `done_callback`.

        `owner`: Any object, used for cancelling all tasks of one owner at once (`cancel_owned`).
                 E.g. a panel, whose requests become useless when it closes.

        Returns an `unpythonic.gsym` representing the task name.
        """
        with self.lock:
            if self.mode == "sequential":
                self.clear()
            env.task_name = gensym(f"{self.name}_task")
            env.cancelled = False
            env.owner = owner
            future = self.executor.submit(function, env)
            self.tasks[env.task_name] = (future, env)
            future.add_done_callback(self._done_callback)
            logger.info(f"TaskManager.submit: instance '{self.name}': task '{env.task_name}' submitted.")
            return env.task_name

    def has_tasks(self) -> bool:
        """Return whether this task manager is currently tracking any tasks."""
        with self.lock:
            return len(self.tasks) > 0

    def tasks_owned_by(self, owner: Any) -> List[gsym]:
        """Return the names of the tracked tasks submitted with `owner`."""
        with self.lock:
            return [task_name for task_name, (f, e) in self.tasks.items() if e.owner is owner]

    def _find_task_by_future(self, future: concurrent.futures.Future) -> gsym:
        """Internal method. Find the `task_name` for a given `future`. Return `task_name`, or `None` if not found."""
        with self.lock:
            for task_name, (f, e) in self.tasks.items():
                if f is future:
                    return task_name
            return None

    def _done_callback(self, future: concurrent.futures.Future) -> None:
        """Internal method. Remove a completed or cancelled task, calling its custom `done_callback` first."""
        try:
            exc = future.exception()  # the future is done, so no timeout needed
        except concurrent.futures.CancelledError:
            pass
        else:
            if exc is not None:
                logger.error(f"TaskManager._done_callback: instance '{self.name}': future '{future}' exited with exception {type(exc)}: {exc}")
                traceback.print_exception(exc)

        with self.lock:
            task_name = self._find_task_by_future(future)
            if task_name is not None:  # `cancel` might have removed it already
                logger.info(f"TaskManager._done_callback: instance '{self.name}': '{task_name}' finalizing.")
                try:
                    future, e = self.tasks[task_name]
                    if "done_callback" in e and e.done_callback is not None:
                        e.done_callback(e)
                finally:
                    self.tasks.pop(task_name)

    def cancel(self, task_name: gsym, pop: bool = True) -> None:
        """Cancel a specific task, by name.

        `pop`: Whether to also stop tracking the task. Mainly for internal use by `clear`.

        Raises `ValueError` if no task with `task_name` was found.
        """
        logger.info(f"TaskManager.cancel: instance '{self.name}': cancelling task '{task_name}'.")
        with self.lock:
            if task_name not in self.tasks:
                raise ValueError(f"TaskManager.cancel: instance '{self.name}': no such task '{task_name}'")
            if pop:
                future, e = self.tasks.pop(task_name)
            else:
                future, e = self.tasks[task_name]
            e.cancelled = True  # set first, so that a `done_callback` sees it when the future is cancelled
            future.cancel()  # if still queued, don't start it

    def cancel_owned(self, owner: Any) -> int:
        """Cancel all tasks submitted with `owner`. Return how many were cancelled."""
        with self.lock:
            task_names = self.tasks_owned_by(owner)
            for task_name in task_names:
                self.cancel(task_name)
        if task_names:
            logger.info(f"TaskManager.cancel_owned: instance '{self.name}': cancelled {len(task_names)} task(s) of {owner}.")
        return len(task_names)

    def clear(self, wait: bool = False) -> None:
        """Cancel all tasks.

        `wait`: Whether to wait for all tasks to exit before returning. Useful at app shutdown.
        """
        logger.info(f"TaskManager.clear: instance '{self.name}': cancelling all tasks.")
        with self.lock:
            for task_name in list(self.tasks.keys()):
                self.cancel(task_name, pop=False)
        # Release the lock while waiting, so that `_done_callback` can run.
        if wait:
            logger.info(f"TaskManager.clear: instance '{self.name}': waiting for tasks to exit.")
            while True:
                with self.lock:
                    futures = [future for future, e in self.tasks.values()]
                if all(future.done() for future in futures):
                    break
                time.sleep(0.01)
        with self.lock:
            self.tasks.clear()
