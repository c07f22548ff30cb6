"""Tests for the task data model."""

import pytest

from taskapi.models.task import Operation


class TestOperation:
    def test_max(self):
        assert Operation.MAX.apply([3, -1, 7]) == 7

    def test_min(self):
        assert Operation.MIN.apply([3, -1, 7]) == -1

    def test_single_operand(self):
        assert Operation.MAX.apply([-128]) == -128
        assert Operation.MIN.apply([127]) == 127

    def test_empty_operands_rejected(self):
        """Reducing nothing is a precondition violation."""
        with pytest.raises(ValueError):
            Operation.MAX.apply([])
        with pytest.raises(ValueError):
            Operation.MIN.apply(())

    def test_wire_values(self):
        assert Operation("Max") is Operation.MAX
        assert Operation("Min") is Operation.MIN
        assert {op.value for op in Operation} == {"Max", "Min"}
