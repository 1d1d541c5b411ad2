"""
Scoped contexts: acquire, run one operation, release.

A ScopedContext subclass owns the logic for producing a context value
(setup) and disposing of it (cleanup). The two invocation wrappers,
with_ref and with_mut_ref, run exactly one caller-supplied operation
against the acquired context and always run cleanup afterwards, even if
the operation raises.

Setup signals failure by returning None. In that case neither the
operation nor cleanup runs, and the invocation returns None.

Usage:
    class Locked(ScopedContext[threading.Lock]):
        def __init__(self, lock):
            self.lock = lock

        def setup(self):
            return self.lock if self.lock.acquire(timeout=1) else None

        def cleanup(self, lock):
            lock.release()

    Locked(lock).with_ref(lambda _: do_work())

An owner is single-use: once an invocation has started, calling either
wrapper again raises OwnerConsumedError. The claim is taken under a lock,
so two threads racing on one owner cannot both run setup; only one wins.
"""

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

from .config import get_config
from .errors import OwnerConsumedError, format_error_for_log
from .views import read_only, revoke

logger = logging.getLogger(__name__)

# Guards the claimed flag of every owner.
_claim_lock = threading.Lock()

C = TypeVar("C")
T = TypeVar("T")


class ScopeState(Enum):
    """Lifecycle of an owner."""
    UNSTARTED = "unstarted"
    ACTIVE = "active"        # context acquired, operation running
    FINISHED = "finished"    # cleanup complete
    FAILED = "failed"        # setup produced no context


class ScopedContext(ABC, Generic[C]):
    """Acquire/release contract with scoped invocation wrappers."""

    _state: ScopeState = ScopeState.UNSTARTED
    _claimed: bool = False

    @abstractmethod
    def setup(self) -> Optional[C]:
        """Acquire the context. Return None if it cannot be acquired."""

    @abstractmethod
    def cleanup(self, context: C) -> None:
        """
        Release a context produced by setup().

        Called exactly once per successful setup. There is no way to
        report failure to the caller; log it instead.
        """

    @property
    def state(self) -> ScopeState:
        """Current lifecycle state."""
        return self._state

    @property
    def consumed(self) -> bool:
        """True once an invocation has started on this owner."""
        return self._claimed

    def with_ref(self, operation: Callable[[C], T]) -> Optional[T]:
        """
        Run operation with a read-only view of the context.

        Immutable contexts (numbers, strings, tuples, ...) are passed as-is.
        The view is revoked after cleanup, so it cannot be used outside
        the call.

        Args:
            operation: Called once with the context

        Returns:
            The operation's result, or None if setup failed
        """
        config = get_config()
        view = read_only if config.scope.read_only_views else None
        return self._invoke(operation, view, config.logging.log_transitions)

    def with_mut_ref(self, operation: Callable[[C], T]) -> Optional[T]:
        """
        Run operation with the context itself.

        In-place changes the operation makes are visible to cleanup().

        Args:
            operation: Called once with the context

        Returns:
            The operation's result, or None if setup failed
        """
        trace = get_config().logging.log_transitions
        return self._invoke(operation, None, trace)

    def _invoke(
        self,
        operation: Callable[[C], T],
        view: Optional[Callable[[C], object]],
        trace: bool,
    ) -> Optional[T]:
        self._claim()
        name = type(self).__name__

        try:
            context = self.setup()
        except BaseException:
            self._state = ScopeState.FAILED
            raise

        if context is None:
            self._state = ScopeState.FAILED
            if trace:
                logger.debug("%s: setup failed, skipping operation", name)
            return None

        self._state = ScopeState.ACTIVE
        if trace:
            logger.debug("%s: context acquired", name)

        handle = view(context) if view else context
        try:
            return operation(handle)
        except BaseException as e:
            if trace:
                logger.debug("%s: operation raised %s", name, format_error_for_log(e))
            raise
        finally:
            try:
                self.cleanup(context)
            finally:
                revoke(handle)
                self._state = ScopeState.FINISHED
                if trace:
                    logger.debug("%s: context released", name)

    def _claim(self) -> None:
        # Claimed before setup runs so a re-entrant call from setup or the
        # operation is rejected too.
        with _claim_lock:
            if self._claimed:
                raise OwnerConsumedError(
                    f"{type(self).__name__} owner already used (state: {self._state.value})"
                )
            self._claimed = True


class FunctionContext(ScopedContext[C]):
    """
    Owner built from a pair of callables.

    Args:
        setup: Returns the context, or None on failure
        cleanup: Receives the context; return value is ignored
    """

    def __init__(
        self,
        setup: Callable[[], Optional[C]],
        cleanup: Callable[[C], object],
    ):
        self._setup = setup
        self._cleanup = cleanup

    def setup(self) -> Optional[C]:
        return self._setup()

    def cleanup(self, context: C) -> None:
        self._cleanup(context)


def scoped(
    setup: Callable[[], Optional[C]],
    cleanup: Callable[[C], object],
) -> FunctionContext[C]:
    """Shorthand for FunctionContext(setup, cleanup)."""
    return FunctionContext(setup, cleanup)
