"""
Array Transform - Models

Stage and signal types used by the lazy pipeline, plus the pydantic models
for declarative operation specs, settings and performance reports.
"""

import inspect
import logging
import os
import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StageKind(str, Enum):
    """Kind of a recorded stage"""
    MAP = "map"
    FILTER = "filter"


class Signal(Enum):
    """Value a traversal callback returns to control the walk"""
    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class Continue:
    """Stage result carrying the (possibly replaced) element forward"""
    value: Any


class _Filtered:
    """Stage result for an element rejected by a filter"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "FILTERED"


FILTERED = _Filtered()


@dataclass(frozen=True)
class Stage:
    """
    One deferred unit of work.

    The callable is adapted to the number of positional arguments it accepts
    on first use, so ``lambda x: x * 2`` and ``lambda x, i: x * i`` both work.
    """
    kind: StageKind
    fn: Callable
    context: Optional[Any] = None

    def __post_init__(self):
        object.__setattr__(self, "_call", None)

    def apply(self, element: Any, index: int):
        """Run the stage on one element, returning ``Continue`` or ``FILTERED``"""
        if self._call is None:
            object.__setattr__(self, "_call", adapt_callable(self.fn, self.context, required=1))

        if self.kind is StageKind.MAP:
            return Continue(self._call(element, index))
        if self._call(element, index):
            return Continue(element)
        return FILTERED


def adapt_callable(fn: Callable, context: Any = None, required: int = 1) -> Callable:
    """
    Bind ``context`` as the receiver of a plain function and trim the
    arguments it is offered down to what its signature accepts.

    ``required`` is the number of core arguments (1 for element callbacks,
    2 for reducers). The trailing index argument is passed only if ``fn``
    can take it. Non-callables are returned wrapped so that the failure
    happens on invocation with Python's usual ``TypeError``.

    Only plain functions take a receiver; bound methods, builtins, classes
    and callable instances already have one and are called unbound.
    Builtins and classes always get just the core arguments.
    """
    if context is not None and isinstance(fn, types.FunctionType):
        fn = types.MethodType(fn, context)

    if inspect.isbuiltin(fn) or isinstance(fn, type):
        return lambda *args: fn(*args[:required])

    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        # Builtins without a signature and non-callables
        return lambda *args: fn(*args[:required])

    positional = 0
    for param in params:
        if param.kind is param.VAR_POSITIONAL:
            return fn
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            positional += 1

    return lambda *args: fn(*args[:positional])


class OperationSpec(BaseModel):
    """Declarative description of one stage, used by ``utils.build_pipeline``"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: StageKind = Field(
        ...,
        description="Stage kind: 'map' or 'filter'"
    )
    function: Callable = Field(
        ...,
        description="Transform or predicate called with (element, index)"
    )
    context: Optional[Any] = Field(
        None,
        description="Object bound as the receiver of the function"
    )


class PipelineSettings(BaseModel):
    """Runtime settings for logging and measurement helpers"""
    log_level: str = Field(
        "INFO",
        description="Logging level name"
    )
    track_memory: bool = Field(
        True,
        description="Whether measure_performance traces memory with tracemalloc"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate the level is a known logging level name"""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        """Build settings from ARRAY_TRANSFORM_* environment variables"""
        values = {}
        if "ARRAY_TRANSFORM_LOG_LEVEL" in os.environ:
            values["log_level"] = os.environ["ARRAY_TRANSFORM_LOG_LEVEL"]
        if "ARRAY_TRANSFORM_TRACK_MEMORY" in os.environ:
            values["track_memory"] = os.environ["ARRAY_TRANSFORM_TRACK_MEMORY"]
        return cls(**values)


class PerformanceReport(BaseModel):
    """Timing and memory figures for one measured call"""
    operation: str
    execution_time_ms: float = Field(..., ge=0)
    memory_usage_mb: Optional[float] = None
    success: bool = True
    result_size: Optional[int] = None
    error: Optional[str] = None
