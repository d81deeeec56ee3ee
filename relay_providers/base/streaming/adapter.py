"""Shared streaming loop used by every handler's ``create_message``.

The adapter owns the lifecycle that is identical across vendors:

* ``Idle -> RequestBuilt``: the handler builds its request and hands the
  adapter a ``starter`` closure that opens the vendor stream.
* ``Streaming``: each native chunk is passed to the handler's ``translator``,
  which yields zero or more uniform events; the cancellation token is polled
  before every chunk.
* ``Completed``: the optional ``finalizer`` flushes per-stream state (tag
  matcher buffers, terminal cost event) and lifecycle metrics are logged.
* ``Failed``: any exception is logged with provider context, wrapped into a
  single :class:`ProviderError` and raised. Nothing is retried here.

Cancellation ends the generator without raising. The token's abort hook
closes the native stream so a blocked network read returns promptly.
"""
from __future__ import annotations

import time
from contextlib import ExitStack, suppress
from typing import Any, Callable, Iterable, Iterator, Optional

from ..cancellation import CancellationToken
from ..errors import ErrorCode, ProviderError, completion_error
from ..logging import LogContext, normalized_log_event
from .events import StreamEvent, UsageEvent
from .finalize import finalize_stream
from .metrics import StreamMetrics, apply_usage

Translator = Callable[[Any], Iterable[StreamEvent]]
Finalizer = Callable[[], Iterable[StreamEvent]]
ErrorWrapper = Callable[[BaseException], ProviderError]


def register_stream_cleanup(stream: Any, stack: ExitStack, token: Optional[CancellationToken] = None) -> None:
    """Close ``stream`` on exit and, when a token is given, on cancellation."""
    close_fn = getattr(stream, "close", None)
    if not callable(close_fn):
        return

    def _safe_close() -> None:
        # already-closed transports raise on a second close
        with suppress(Exception):
            close_fn()

    stack.callback(_safe_close)
    if token is not None:
        token.on_cancel(_safe_close)


class BaseStreamingAdapter:
    """Encapsulates the provider streaming loop boilerplate.

    Args:
        ctx: Log context (provider, model, request id).
        provider_name: Provider key used in errors and logs.
        label: Human provider name used in error messages ("OpenRouter").
        model: Model id used for this request.
        starter: Opens the native stream; may raise.
        translator: Maps one native chunk to uniform events.
        finalizer: Emits trailing events after the native stream ends.
        logger: Logger from :func:`relay_providers.base.logging.get_logger`.
        cancellation_token: Optional token polled before each chunk.
        error_wrapper: Converts an exception to ``ProviderError``; defaults
            to :func:`completion_error` with ``label``.
    """

    def __init__(
        self,
        *,
        ctx: LogContext,
        provider_name: str,
        label: str,
        model: str,
        starter: Callable[[], Iterable[Any]],
        translator: Translator,
        logger,
        finalizer: Optional[Finalizer] = None,
        cancellation_token: Optional[CancellationToken] = None,
        error_wrapper: Optional[ErrorWrapper] = None,
    ) -> None:
        self.ctx = ctx
        self.provider_name = provider_name
        self.label = label
        self.model = model
        self._starter = starter
        self._translator = translator
        self._finalizer = finalizer
        self._logger = logger
        self._cancellation_token = cancellation_token
        self._error_wrapper = error_wrapper
        self.metrics = StreamMetrics()

    @property
    def cancelled(self) -> bool:
        return self._cancellation_token is not None and self._cancellation_token.cancelled

    def run(self) -> Iterator[StreamEvent]:
        """Execute the streaming lifecycle, yielding uniform events."""
        t0 = time.perf_counter()
        normalized_log_event(self._logger, "stream.start", self.ctx, phase="start", emitted=None, tokens=None)
        if self.cancelled:
            self._finish(t0, cancelled=True)
            return
        with ExitStack() as stack:
            try:
                stream = self._starter()
            except Exception as e:
                self._raise_wrapped(e, t0)
            register_stream_cleanup(stream, stack, self._cancellation_token)
            try:
                for chunk in stream:
                    if self.cancelled:
                        self._finish(t0, cancelled=True)
                        return
                    for evt in self._translator(chunk):
                        self._record(evt, t0)
                        yield evt
                if self.cancelled:
                    self._finish(t0, cancelled=True)
                    return
                if self._finalizer is not None:
                    for evt in self._finalizer():
                        self._record(evt, t0)
                        yield evt
            except Exception as e:
                if self.cancelled and not isinstance(e, ProviderError):
                    # the abort hook closed the transport under the reader
                    self._finish(t0, cancelled=True)
                    return
                self._raise_wrapped(e, t0)
        self._finish(t0)

    def _record(self, evt: StreamEvent, t0: float) -> None:
        if self.metrics.emitted == 0:
            self.metrics.time_to_first_token_ms = (time.perf_counter() - t0) * 1000.0
        self.metrics.emitted += 1
        if isinstance(evt, UsageEvent):
            apply_usage(self.metrics, evt)

    def _finish(self, t0: float, *, cancelled: bool = False) -> None:
        self.metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
        finalize_stream(logger=self._logger, ctx=self.ctx, metrics=self.metrics, cancelled=cancelled)

    def _raise_wrapped(self, exc: Exception, t0: float) -> None:
        err = self._fail(exc, t0)
        if err is exc:
            raise err
        raise err from exc

    def _fail(self, exc: BaseException, t0: float) -> ProviderError:
        if self._error_wrapper is not None:
            err = self._error_wrapper(exc)
        else:
            err = completion_error(self.label, exc, provider=self.provider_name, model=self.model)
        self.metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
        finalize_stream(
            logger=self._logger,
            ctx=self.ctx,
            metrics=self.metrics,
            error_code=(err.code or ErrorCode.UNKNOWN).value,
            error=err.message,
        )
        return err


def run_event_stream(**kwargs: Any) -> Iterator[StreamEvent]:
    """Shortcut for ``BaseStreamingAdapter(**kwargs).run()``."""
    return BaseStreamingAdapter(**kwargs).run()


__all__ = ["BaseStreamingAdapter", "register_stream_cleanup", "run_event_stream"]
