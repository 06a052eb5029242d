import operator

import pytest
from lazy import ArrayTransform


def doubled_without_multiples_of_four(source):
    return ArrayTransform(source).map(lambda x: 2 * x).filter(lambda x: x % 4 != 0)


class TestReductions:
    """Test reduce and reduce_right"""

    def test_reduce(self, numbers):
        """Test reducing the result to a single element"""
        result = doubled_without_multiples_of_four(numbers).reduce(lambda a, b: a + b, 0)
        assert result == 2 + 6 + 10, f"Expected 18, got {result}"

    def test_reduce_right(self, numbers):
        """Test reducing from right to left"""
        result = doubled_without_multiples_of_four(numbers).reduce_right(lambda a, b: a + b, 0)
        assert result == 10 + 6 + 2, f"Expected 18, got {result}"

    def test_reduce_order(self, numbers):
        """Test accumulation order with a non-commutative reducer"""
        pipeline = doubled_without_multiples_of_four(numbers)

        assert pipeline.reduce(lambda acc, x: acc + [x], []) == [2, 6, 10]
        assert pipeline.reduce_right(lambda acc, x: acc + [x], []) == [10, 6, 2]

    def test_reducer_receives_source_indices(self, numbers):
        """Test that reducers see original indices in both directions"""
        pipeline = doubled_without_multiples_of_four(numbers)

        forward = pipeline.reduce(lambda acc, x, i: acc + [(x, i)], [])
        backward = pipeline.reduce_right(lambda acc, x, i: acc + [(x, i)], [])

        assert forward == [(2, 0), (6, 2), (10, 4)]
        assert backward == [(10, 4), (6, 2), (2, 0)]

    def test_reduce_right_matches_reduce_on_reversed_source(self):
        """Test reduce_right over S equals reduce over reversed S, bar indices"""
        source = [3, 1, 4, 1, 5, 9, 2, 6]

        def build(data):
            return ArrayTransform(data).map(lambda x: x * 3).filter(lambda x: x % 2 == 1)

        right = build(source).reduce_right(lambda acc, x: acc + [x], [])
        left = build(source[::-1]).reduce(lambda acc, x: acc + [x], [])
        assert right == left

    def test_reduce_empty_returns_initial(self):
        """Test that an empty survivor set leaves the initial value untouched"""
        marker = object()
        assert ArrayTransform([]).reduce(lambda a, b: a + b, marker) is marker
        assert ArrayTransform([1, 2]).filter(lambda x: False).reduce_right(lambda a, b: a + b, marker) is marker

    def test_reduce_accepts_binary_builtins(self, numbers):
        assert ArrayTransform(numbers).reduce(operator.mul, 1) == 120


class TestSomeEvery:
    """Test some, every and membership"""

    def test_some(self, numbers):
        """Test whether some element passes a test"""
        assert doubled_without_multiples_of_four(numbers).some(lambda el: el == 10) is True
        assert doubled_without_multiples_of_four(numbers).some(lambda el: el == 8) is False

    def test_every(self, numbers):
        """Test whether every element passes a test"""
        assert doubled_without_multiples_of_four(numbers).every(lambda el: el > 0) is True
        assert doubled_without_multiples_of_four(numbers).every(lambda el: el < 10) is False

    def test_some_stops_after_first_match(self):
        """Test that the predicate is not called after the first truthy result"""
        calls = []

        def predicate(el):
            calls.append(el)
            return el > 2

        assert ArrayTransform([1, 2, 3, 4, 5]).some(predicate) is True
        assert calls == [1, 2, 3], f"Predicate ran past the first match: {calls}"

    def test_every_stops_after_first_failure(self):
        """Test that the predicate is not called after the first falsy result"""
        calls = []

        def predicate(el):
            calls.append(el)
            return el < 2

        assert ArrayTransform([1, 2, 3, 4, 5]).every(predicate) is False
        assert calls == [1, 2], f"Predicate ran past the first failure: {calls}"

    def test_early_exit_skips_stages_for_remaining_elements(self):
        mapped = []
        ArrayTransform([1, 2, 3, 4]).map(lambda x: mapped.append(x) or x).some(lambda x: x == 2)
        assert mapped == [1, 2]

    @pytest.mark.parametrize("source", [[], [1, 3, 5]])
    def test_vacuous_truth(self, source):
        """Test every/some on an empty survivor set"""
        pipeline = ArrayTransform(source).filter(lambda x: x % 2 == 0)

        assert pipeline.every(lambda x: False) is True
        assert pipeline.some(lambda x: True) is False

    def test_truthiness_not_identity(self):
        """Test that predicates may return any truthy or falsy value"""
        pipeline = ArrayTransform(["", "x", None])
        assert pipeline.some(lambda el: el) is True
        assert pipeline.every(lambda el: el) is False

    def test_predicates_receive_index(self):
        pipeline = ArrayTransform(["a", "b", "c"]).filter(lambda el: el != "a")
        assert pipeline.some(lambda el, i: i == 2) is True
        assert pipeline.every(lambda el, i: i > 0) is True

    def test_membership(self, numbers):
        """Test the in operator runs the pipeline"""
        pipeline = doubled_without_multiples_of_four(numbers)

        assert 6 in pipeline
        assert 8 not in pipeline
        assert 3 not in pipeline
