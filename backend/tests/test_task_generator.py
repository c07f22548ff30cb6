"""Tests for random task generation."""

import random
import uuid

from taskapi.models.task import INT8_MAX, INT8_MIN, Operation
from taskapi.services.task_generator import MAX_OPERAND_COUNT, TaskGenerator


class ZeroCountsFirst(random.Random):
    """Random source whose first operand-count draws come up zero."""

    zero_draws = 3

    def randint(self, a, b):
        if b == MAX_OPERAND_COUNT and self.zero_draws:
            self.zero_draws -= 1
            return 0
        return super().randint(a, b)


class TestGenerate:
    def test_expected_result_matches_operation(self):
        generator = TaskGenerator(random.Random(7))
        for _ in range(200):
            task, expected = generator.generate()
            assert expected == task.operation.apply(task.operands)

    def test_operands_never_empty_and_within_int8(self):
        generator = TaskGenerator(random.Random(11))
        for _ in range(200):
            task, _ = generator.generate()
            assert 1 <= len(task.operands) <= MAX_OPERAND_COUNT
            assert all(INT8_MIN <= value <= INT8_MAX for value in task.operands)

    def test_zero_operand_count_is_redrawn(self):
        rng = ZeroCountsFirst(5)
        task, expected = TaskGenerator(rng).generate()
        assert rng.zero_draws == 0
        assert len(task.operands) > 0
        assert expected == task.operation.apply(task.operands)

    def test_task_id_is_uuid4(self):
        task, _ = TaskGenerator().generate()
        parsed = uuid.UUID(task.id)
        assert parsed.version == 4
        assert str(parsed) == task.id

    def test_task_ids_unique(self):
        generator = TaskGenerator()
        ids = {generator.generate()[0].id for _ in range(1000)}
        assert len(ids) == 1000

    def test_both_operations_drawn(self):
        generator = TaskGenerator(random.Random(3))
        ops = {generator.generate()[0].operation for _ in range(100)}
        assert ops == set(Operation)

    def test_seeded_generators_agree(self):
        first = TaskGenerator(random.Random(42))
        second = TaskGenerator(random.Random(42))
        for _ in range(10):
            assert first.generate() == second.generate()
