"""Tests for calculator operations and tagged actions."""

import pytest
from pydantic import ValidationError

from qcalc.core.errors import UnsupportedOperationError
from qcalc.core.models.actions import (
    ComputeAction,
    Operation,
    RecallAction,
    StoreAction,
    parse_action,
)
from qcalc.core.models.values import OperandId, QuaternionValue


class TestOperation:
    """Test operation label parsing."""

    @pytest.mark.parametrize("label,expected", [
        ("add", Operation.ADD),
        ("subtract", Operation.SUBTRACT),
        ("sub", Operation.SUBTRACT),
        ("mul", Operation.MULTIPLY),
        ("div", Operation.DIVIDE),
        (" Divide ", Operation.DIVIDE),
        (Operation.MULTIPLY, Operation.MULTIPLY),
    ])
    def test_parse(self, label, expected):
        assert Operation.parse(label) is expected

    @pytest.mark.parametrize("label", ["modulo", "", None, 3, "none"])
    def test_parse_unsupported(self, label):
        with pytest.raises(UnsupportedOperationError) as exc_info:
            Operation.parse(label)

        assert exc_info.value.operation == label
        assert isinstance(exc_info.value, ValueError)


class TestActions:
    """Test the closed set of calculator actions."""

    def test_compute_action(self):
        action = parse_action({
            "type": "compute",
            "operation": "mul",
            "q1": {"w": 1, "i": 0, "j": 0, "k": 0},
            "q2": {"w": 0, "i": 1, "j": 0, "k": 0},
        })

        assert isinstance(action, ComputeAction)
        assert action.operation is Operation.MULTIPLY
        assert action.q2.to_array() == [0.0, 1.0, 0.0, 0.0]

    def test_compute_action_direct(self):
        action = ComputeAction(operation="add", q1=QuaternionValue(1, 0, 0, 0), q2=QuaternionValue(0, 1, 0, 0))
        assert action.type == "compute"
        assert action.operation is Operation.ADD

    def test_store_action(self):
        action = parse_action({"type": "store", "identity": "Q_2", "value": {"w": 1, "i": 2, "j": 3, "k": 4}})

        assert isinstance(action, StoreAction)
        assert action.identity is OperandId.SECOND
        assert action.value.to_array() == [1.0, 2.0, 3.0, 4.0]

    def test_recall_action(self):
        action = parse_action({"type": "recall", "identity": "Q_1"})

        assert isinstance(action, RecallAction)
        assert action.identity is OperandId.FIRST

    def test_unknown_action_type(self):
        with pytest.raises(ValidationError):
            parse_action({"type": "clear"})

    def test_unsupported_operation_rejected_at_construction(self):
        with pytest.raises(ValidationError):
            parse_action({
                "type": "compute",
                "operation": "modulo",
                "q1": {"w": 1},
                "q2": {"w": 1},
            })

    def test_missing_fields(self):
        with pytest.raises(ValidationError):
            parse_action({"type": "store", "identity": "Q_1"})

        with pytest.raises(ValidationError):
            parse_action({"type": "recall", "identity": "Q_3"})
