import logging
from typing import Any, Callable, Iterator, Sequence

from models import FILTERED, Signal, Stage, StageKind, adapt_callable

logger = logging.getLogger(__name__)


class ArrayTransform:
    """
    A chainable, lazy transformation over a finite sequence. ``map`` and
    ``filter`` only record stages; every stage runs element by element in a
    single pass when a terminal operation is called.

    Builder calls mutate and return the same instance. The source is held by
    reference and must not be mutated while a terminal operation runs.
    """

    STOP = Signal.STOP

    def __init__(self, source: Sequence[Any]):
        self._source = source
        self._stages = []              # append-only, applied in order

    # --------- chainable operators (lazy) ----------
    def map(self, fn: Callable, context: Any = None) -> "ArrayTransform":
        """Replace every element with ``fn(element, index)``"""
        self._stages.append(Stage(StageKind.MAP, fn, context))
        return self

    def filter(self, fn: Callable, context: Any = None) -> "ArrayTransform":
        """Drop every element for which ``fn(element, index)`` is falsy"""
        self._stages.append(Stage(StageKind.FILTER, fn, context))
        return self

    @property
    def stages(self):
        return tuple(self._stages)

    # --------- traversal ----------
    def _walk(self, backwards: bool = False) -> Iterator[tuple]:
        """Yield ``(element, index)`` for every survivor of the stage list"""
        length = len(self._source)
        indices = range(length - 1, -1, -1) if backwards else range(length)

        for index in indices:
            element = self._source[index]
            for stage in self._stages:
                result = stage.apply(element, index)
                if result is FILTERED:
                    break
                element = result.value
            else:
                yield element, index

    def for_each(self, fn: Callable, context: Any = None, reversed: bool = False) -> None:
        """
        Call ``fn(element, index)`` for every surviving element.

        This runs all recorded stages. The index is always the position in
        the source, also when walking right to left. Returning
        ``ArrayTransform.STOP`` from ``fn`` ends the walk.
        """
        call = adapt_callable(fn, context, required=1)
        logger.debug(
            f"Walking {len(self._source)} elements through {len(self._stages)} stages "
            f"({'right to left' if reversed else 'left to right'})"
        )

        for element, index in self._walk(backwards=reversed):
            if call(element, index) is Signal.STOP:
                logger.debug(f"Walk stopped at index {index}")
                return

    # --------- forcing evaluation ----------
    def to_list(self) -> list:
        result = []
        self.for_each(lambda el: result.append(el))
        return result

    def __iter__(self):
        for element, _ in self._walk():
            yield element

    # --------- reducing operations (force evaluation) ----------
    def reduce(self, fn: Callable, initial: Any, context: Any = None) -> Any:
        """Fold survivors left to right with ``fn(accumulator, element, index)``"""
        return self._fold(fn, initial, context, backwards=False)

    def reduce_right(self, fn: Callable, initial: Any, context: Any = None) -> Any:
        """Fold survivors right to left; indices stay the source positions"""
        return self._fold(fn, initial, context, backwards=True)

    def some(self, fn: Callable, context: Any = None) -> bool:
        """Return True as soon as one survivor passes ``fn``"""
        test = adapt_callable(fn, context, required=1)
        found = False

        def check(el, index):
            nonlocal found
            if test(el, index):
                found = True
                return Signal.STOP

        self.for_each(check)
        return found

    def every(self, fn: Callable, context: Any = None) -> bool:
        """Return False as soon as one survivor fails ``fn``; True when none survive"""
        test = adapt_callable(fn, context, required=1)
        passed = True

        def check(el, index):
            nonlocal passed
            if not test(el, index):
                passed = False
                return Signal.STOP

        self.for_each(check)
        return passed

    def __contains__(self, value) -> bool:
        return self.some(lambda el: el == value)

    # --------- helpers ----------
    def _fold(self, fn, initial, context, backwards):
        combine = adapt_callable(fn, context, required=2)
        accumulator = initial

        def step(el, index):
            nonlocal accumulator
            accumulator = combine(accumulator, el, index)

        self.for_each(step, reversed=backwards)
        return accumulator

    def __repr__(self):
        kinds = ", ".join(stage.kind.value for stage in self._stages)
        return f"ArrayTransform(<{len(self._source)} elements>, stages=[{kinds}])"

    # Array-style names
    forEach = for_each
    toArray = to_list
    reduceRight = reduce_right
