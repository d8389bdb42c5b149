"""Per-frame animation mechanism.

The app's render loop calls `animator.render_frame()` once per frame. Each registered
`Animation` then gets its `render_frame(t)` called, and decides by its return value
whether it keeps running. Widgets that need per-frame updates (e.g. the graph widget,
which repaints when its camera moved) register themselves as never-ending animations.

This module has no GUI toolkit dependencies, so that animations can be tested headless.
"""

__all__ = ["Animator", "animator",  # controller and its global instance (need only one per app)
           "Animation",  # base class
           "action_continue", "action_finish", "action_cancel"]  # return values for `render_frame`

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

import threading
import time

from unpythonic import sym

# --------------------------------------------------------------------------------
# Animation mechanism

action_continue = sym("continue")  # keep rendering
action_finish = sym("finish")  # end animation, call the `finish` method
action_cancel = sym("cancel")  # end animation without calling the `finish` method

class Animator:
    def __init__(self):
        """A simple animation manager."""
        self.animations = []
        self.animation_list_lock = threading.RLock()

    def add(self, animation):
        """Register an `Animation`, and (re)start it: its start time `animation.t0` is set to now."""
        with self.animation_list_lock:
            animation.reset()
            self.animations.append(animation)
        return animation

    def cancel(self, animation, finalize=True):
        """Terminate a running `Animation` before it finishes by itself.

        `finalize`: If `True` (default), call the `finish` method of the animation before removing it.
        """
        with self.animation_list_lock:
            if finalize:
                animation.finish()
            try:
                self.animations.remove(animation)
            except ValueError:  # not in list
                logger.debug(f"Animator.cancel: {animation} is not registered (maybe already finished?), skipping removal.")
        return animation

    def is_running(self, animation) -> bool:
        with self.animation_list_lock:
            return any(a is animation for a in self.animations)

    def render_frame(self, t=None):
        """Render one frame of each registered animation, in the order they were registered.

        `t`: int; frame time as returned by `time.time_ns()`. Default is now.

        An animation whose `render_frame` returns `action_finish` gets its `finish` method called,
        and is removed. One that returns `action_cancel` is just removed.

        Animations may add or cancel animations while the frame renders; those changes
        take effect from the next frame.
        """
        with self.animation_list_lock:
            time_now = t if t is not None else time.time_ns()
            current = list(self.animations)
            ended = []
            for animation in current:
                action = animation.render_frame(t=time_now)
                if action is action_continue:
                    continue
                elif action is action_finish:
                    animation.finish()
                elif action is not action_cancel:
                    raise ValueError(f"Animator.render_frame: unknown action {action}, expected one of `action_continue`, `action_finish`, `action_cancel`.")
                ended.append(animation)
            self.animations[:] = [a for a in self.animations if not any(a is e for e in ended)]

    def clear(self):
        """Terminate all registered animations (calling their `finish`), and clear the registry."""
        with self.animation_list_lock:
            for animation in list(self.animations):  # `finish` may cancel other animations
                animation.finish()
            self.animations.clear()
animator = Animator()

class Animation:
    def __init__(self):
        """Base class for animations. An `Animation` can be added to an `Animator`."""
        super().__init__()
        self.reset()

    def reset(self):
        """(Re-)start the animation from the beginning: set the start time `self.t0` to now (`time.time_ns()`)."""
        self.t0 = time.time_ns()

    def elapsed(self, t) -> float:
        """Return seconds since the start of the animation, at frame time `t` (nanoseconds)."""
        return (t - self.t0) / 10**9

    def render_frame(self, t):
        """Override this in a derived class to render one frame of your animation.

        `t`: int; time at start of current frame as returned by `time.time_ns()`.

        Return value must be one of:
            `action_continue` if the animation should continue,
            `action_finish` if the animation should end, automatically calling its `finish` method.
            `action_cancel` if the animation should end, *without* calling its `finish` method.
        """
        return action_finish

    def finish(self):
        """Override this in a derived class to clean up at the end of the animation."""
