"""
Deferred-result adapter.

Builder operations are written as plain methods that validate their
arguments and return a ``NodeRequest``. ``deferrable`` turns such a method
into the public operation: the request is executed and the outcome is
delivered through a ``concurrent.futures.Future``, or through a
``callback(error, result)`` when the caller supplies one.
"""
import functools
import logging
from concurrent.futures import Executor, Future
from typing import Any, Callable, Optional, TypeVar

from .exceptions import TronTxError

logger = logging.getLogger(__name__)

T = TypeVar('T')

Callback = Callable[[Optional[BaseException], Any], Any]


def run_deferred(future: Future, fn: Callable[[], T], executor: Optional[Executor] = None) -> Future:
    """
    Resolve ``future`` with the outcome of ``fn``.

    Runs inline when no executor is given, so the future is already done
    when this returns.
    """
    def _run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn()
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    if executor is None:
        _run()
    else:
        executor.submit(_run)
    return future


def deliver(callback: Callback, future: Future) -> None:
    """Call ``callback(error, result)`` for a finished future."""
    error = future.exception()
    if error is not None:
        callback(error, None)
    else:
        callback(None, future.result())


def deferrable(method: Callable[..., Any]) -> Callable[..., Any]:
    """
    Wrap a request-building method into a Future/callback operation.

    The wrapped method must return a ``NodeRequest`` or raise a
    ``TronTxError``; the owner must provide ``_execute(request)`` and an
    ``executor`` attribute. Validation runs in the caller's thread, so an
    invalid call is rejected before any network activity.
    """
    @functools.wraps(method)
    def wrapper(self, *args, callback: Optional[Callback] = None, **kwargs):
        future: Future = Future()

        try:
            request = method(self, *args, **kwargs)
        except TronTxError as e:
            logger.debug("%s rejected: %s", method.__name__, e)
            future.set_exception(e)
        else:
            run_deferred(future, functools.partial(self._execute, request), self.executor)

        if callback is None:
            return future

        if future.done():
            deliver(callback, future)
        else:
            future.add_done_callback(functools.partial(deliver, callback))
        return None

    return wrapper
