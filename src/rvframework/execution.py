"""
Contains the ValidationEngine which runs the async validators of a control tree.

All mutations of the control tree happen on the thread of the asyncio event loop. The async validators run as tasks on
that loop and report back through done callbacks, which the loop executes on its own thread as well - so settling a
validation never races with a value change. Each run is tagged with a generation; results of runs which got superseded
(or cancelled) are discarded, even if they arrive after the cancellation.
"""
import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Optional

from .config import EngineConfig
from .errors import AsyncValidatorError, format_path
from .result import ValidationResult
from .validator import AsyncValidator
from .view import ControlView

if TYPE_CHECKING:
    from .controls.base import AbstractControl

_logger = logging.getLogger(__name__)


# pylint: disable=too-many-instance-attributes
class AsyncRun:
    """
    One generation of async validation of a single control. It settles once every async validator of the control
    delivered a result. It is discarded if the control starts a new generation in the meantime.
    """

    def __init__(self, engine: "ValidationEngine", control: "AbstractControl", generation: int, view: ControlView):
        self.engine = engine
        self.control = control
        self.generation = generation
        self.view = view
        self.validators: tuple[AsyncValidator, ...] = control.async_validators
        self.results: list[ValidationResult] = [ValidationResult.valid()] * len(self.validators)
        self.remaining = len(self.validators)
        self.tasks: list[asyncio.Task] = []
        self.timer: Optional[asyncio.TimerHandle] = None
        self.done: Optional[asyncio.Future] = None
        self.cancelled = False

    @property
    def current(self) -> bool:
        """False if the run got cancelled or superseded by a newer generation"""
        return not self.cancelled and self.control._async_run is self  # pylint: disable=protected-access

    def cancel(self) -> None:
        """
        Best effort cancellation: the tasks get cancelled, but a validator may still deliver a result. Such late
        results are dropped because the run isn't current anymore.
        """
        if self.cancelled:
            return
        self.cancelled = True
        if self.timer is not None:
            self.timer.cancel()
        for task in self.tasks:
            if not task.done():
                task.cancel()
        _logger.debug("Cancelled generation %d of %s", self.generation, format_path(self.control.path))
        self.engine._finish(self)  # pylint: disable=protected-access

    def __repr__(self):
        return f"AsyncRun({format_path(self.control.path)}, generation={self.generation})"


class ValidationEngine:
    """
    Schedules the async validators of a control tree. All controls of a tree share the engine of their root.
    Use `await engine.settle()` to wait until no async validation is outstanding.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config if config is not None else EngineConfig()
        self._active: set[AsyncRun] = set()
        self._deferred: list[AsyncRun] = []
        self._faults: list[AsyncValidatorError] = []

    @property
    def has_pending(self) -> bool:
        """True if any async run of this engine didn't settle yet"""
        return len(self._active) > 0

    def recompute(self, control: "AbstractControl") -> None:
        """Recomputes the control and its ancestors (see `AbstractControl.update_value_and_validity`)"""
        control.update_value_and_validity()

    def start(self, control: "AbstractControl", view: ControlView) -> AsyncRun:
        """
        Starts a new generation of async validation for the control. The caller has to cancel the previous
        generation beforehand. If no event loop is running, the run is deferred until the next call to `settle`.
        """
        control._generation += 1  # pylint: disable=protected-access
        run = AsyncRun(self, control, control.generation, view)
        control._async_run = run  # pylint: disable=protected-access
        self._active.add(run)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running event loop; deferring %r", run)
            self._deferred.append(run)
            return run
        self._schedule(run, loop)
        return run

    def _schedule(self, run: AsyncRun, loop: asyncio.AbstractEventLoop) -> None:
        run.done = loop.create_future()
        if self.config.debounce > 0:
            run.timer = loop.call_later(self.config.debounce, self._launch_debounced, run, loop)
        else:
            self._launch(run, loop)

    def _launch(self, run: AsyncRun, loop: asyncio.AbstractEventLoop) -> None:
        """
        Starts one task per validator. The validator functions are called inside the tasks, so a run which gets
        cancelled before its tasks started never calls them.
        """
        _logger.debug("Starting %r with %d async validator(s)", run, len(run.validators))
        for index, validator in enumerate(run.validators):
            task = loop.create_task(validator(run.view))
            task.add_done_callback(functools.partial(self._on_task_done, run, index))
            run.tasks.append(task)

    def _launch_debounced(self, run: AsyncRun, loop: asyncio.AbstractEventLoop) -> None:
        run.timer = None
        if run.current:
            self._launch(run, loop)

    def _on_task_done(self, run: AsyncRun, index: int, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if not run.current:
            _logger.debug("Discarding stale result of %r", run)
            return
        if error is not None:
            self._record_fault(run, run.validators[index].name, error)
            run.cancel()
            return
        run.results[index] = task.result()
        run.remaining -= 1
        if run.remaining == 0:
            result = ValidationResult.merge_all(run.results)
            _logger.debug("Settled %r: %r", run, result)
            self._finish(run)
            run.control._settle_async(result)  # pylint: disable=protected-access

    def _record_fault(self, run: AsyncRun, validator_name: str, error: BaseException) -> None:
        fault = AsyncValidatorError(validator_name, run.control.path)
        fault.__cause__ = error
        _logger.error("Async validator '%s' failed in %r: %r", validator_name, run, error)
        self._faults.append(fault)

    def _finish(self, run: AsyncRun) -> None:
        self._active.discard(run)
        if run in self._deferred:
            self._deferred.remove(run)
        if run.done is not None and not run.done.done():
            run.done.set_result(None)

    async def settle(self) -> None:
        """
        Starts deferred runs and waits until no async validation is outstanding, including runs which get started
        while waiting. Afterwards the first fault of an async validator (if any) is raised as AsyncValidatorError.
        Note that this never returns if an async validator never delivers a result.
        """
        loop = asyncio.get_running_loop()
        while len(self._deferred) > 0:
            self._schedule(self._deferred.pop(0), loop)
        while len(self._active) > 0:
            waiting = [run.done for run in self._active if run.done is not None]
            if len(waiting) == 0:
                break
            await asyncio.wait(waiting)
        if len(self._faults) > 0:
            fault = self._faults[0]
            self._faults.clear()
            raise fault
