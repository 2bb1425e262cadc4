"""Step timing for ``--verbose`` runs.

Service entry points are wrapped in :func:`traced`; each install step opens a
:func:`trace_span`. With telemetry on, the finished tree lands in
``ServiceResult.meta["telemetry"]``, e.g. ``InstallService.install`` with one
child per step carrying its status and package count. With telemetry off
both are a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from gnvctl.services.result import ServiceResult

log = structlog.get_logger("gnvctl.telemetry")

_enabled: ContextVar[bool] = ContextVar("gnvctl_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("gnvctl_active_span", default=None)


@dataclass
class Span:
    """One timed region: a service call or an install step."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)

    @property
    def elapsed_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def note(self, key: str, value: Any) -> None:
        self.attrs[key] = value

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.elapsed_ms, 2)}
        if self.attrs:
            out["attrs"] = dict(self.attrs)
        if self.children:
            out["children"] = [child.as_dict() for child in self.children]
        return out


@contextmanager
def _opened(name: str, parent: Span | None) -> Iterator[Span]:
    span = Span(name=name)
    if parent is not None:
        parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.finished = time.perf_counter()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a step inside the current traced call.

    Yields None when telemetry is off or no traced call is running, so
    callers guard ``note()`` with ``if span is not None``.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    with _opened(name, parent) as span:
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time *func*; a returned ServiceResult gets the span tree in ``meta``.

    A traced call made inside another (``add`` running ``install``) becomes a
    child of the outer span.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        with _opened(func.__qualname__, _active.get()) as span:
            result = func(*args, **kwargs)
        ok = result.ok if isinstance(result, ServiceResult) else True
        log.debug(
            "span.complete",
            span_name=span.name,
            duration_ms=round(span.elapsed_ms, 2),
            ok=ok,
            steps=len(span.children),
        )
        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.as_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for this context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
