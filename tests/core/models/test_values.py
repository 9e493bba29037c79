"""Tests for the quaternion value holder."""

import math

import numpy as np
import pytest

from qcalc.core.models.values import OperandId, QuaternionValue, finite_or_none


class TestQuaternionValue:
    """Test construction, validation and copying."""

    def test_creation(self):
        """Test basic value creation."""
        q = QuaternionValue(1, -2.5, 3, 0, id="Q_1")

        assert q.to_array() == [1.0, -2.5, 3.0, 0.0]
        assert isinstance(q.w, float)
        assert q.id == "Q_1"

    def test_defaults(self):
        q = QuaternionValue()
        assert q.to_array() == [0.0, 0.0, 0.0, 0.0]
        assert q.id is None

    def test_keyword_creation(self):
        q = QuaternionValue(w=1.0, k=2.0)
        assert q.to_array() == [1.0, 0.0, 0.0, 2.0]

    def test_non_finite_components_rejected(self):
        """Test NaN, infinities and non-numbers keep the zero default."""
        q = QuaternionValue(float("nan"), float("inf"), -math.inf, "abc")
        assert q.to_array() == [0.0, 0.0, 0.0, 0.0]

    def test_numeric_strings_accepted(self):
        q = QuaternionValue("1.5", "-2", 0, 0)
        assert q.to_array() == [1.5, -2.0, 0.0, 0.0]

    def test_assignment_keeps_prior_value(self):
        """Test non-finite assignment is silently ignored."""
        q = QuaternionValue(1, 2, 3, 4)

        q.w = float("nan")
        q.i = float("inf")
        q.j = None
        q.k = "not a number"

        assert q.to_array() == [1.0, 2.0, 3.0, 4.0]

    def test_assignment_updates(self):
        q = QuaternionValue(1, 2, 3, 4)
        q.w = -7
        q.k = "0.25"

        assert q.to_array() == [-7.0, 2.0, 3.0, 0.25]

    def test_model_validate_rejects_non_finite(self):
        q = QuaternionValue.model_validate({"w": float("nan"), "i": 1.0, "j": 2.0, "k": 3.0, "id": "Q_2"})

        assert q.to_array() == [0.0, 1.0, 2.0, 3.0]
        assert q.id == "Q_2"

    def test_clone_is_independent(self):
        """Test clone copies components and id."""
        q = QuaternionValue(1, 2, 3, 4, id="Q_1")
        c = q.clone()

        assert c == q
        assert c is not q

        c.w = 10
        c.id = "Q_2"
        assert q.w == 1.0
        assert q.id == "Q_1"

    def test_from_array(self):
        assert QuaternionValue.from_array([1, 2, 3, 4]).to_array() == [1.0, 2.0, 3.0, 4.0]
        assert QuaternionValue.from_array([2, 3, 4]).to_array() == [1.0, 2.0, 3.0, 4.0]
        assert QuaternionValue.from_array([1, 2, 3, 4], id="Q_1").id == "Q_1"

    def test_from_array_invalid_length(self):
        with pytest.raises(ValueError):
            QuaternionValue.from_array([1, 2])

        with pytest.raises(ValueError):
            QuaternionValue.from_array([1, 2, 3, 4, 5])

    def test_from_dict(self):
        """Test missing and non-finite keys fall back to zero."""
        q = QuaternionValue.from_dict({"w": 1.0, "j": float("nan"), "k": 2.0, "id": "Q_2"})

        assert q.to_array() == [1.0, 0.0, 0.0, 2.0]
        assert q.id == "Q_2"

    def test_export(self):
        q = QuaternionValue(1, 2, 3, 4)

        assert q.to_dict() == {"w": 1.0, "i": 2.0, "j": 3.0, "k": 4.0}
        np.testing.assert_allclose(q.to_numpy(), [1, 2, 3, 4])


class TestFiniteOrNone:
    """Test the component coercion helper."""

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), -float("inf"), None, "x", [1.0]])
    def test_rejected(self, value):
        assert finite_or_none(value) is None

    @pytest.mark.parametrize("value,expected", [(0, 0.0), (-3, -3.0), ("2.5", 2.5), (np.float64(1.5), 1.5)])
    def test_accepted(self, value, expected):
        assert finite_or_none(value) == expected


def test_operand_ids():
    assert OperandId("Q_1") is OperandId.FIRST
    assert OperandId("Q_2") is OperandId.SECOND
    with pytest.raises(ValueError):
        OperandId("Q_3")
