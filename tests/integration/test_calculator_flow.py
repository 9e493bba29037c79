"""End-to-end calculator flow: load a document, compute, use memory."""

import json

import numpy as np

from qcalc import (
    CalcModel,
    MemoryAction,
    MemorySlot,
    OperandId,
    OperationDispatcher,
    QuaternionAlgebra,
    QuaternionValue,
    ResultKind,
    parse_action,
)


def test_document_compute_and_memory():
    """Test the calculator sequence a host application drives."""
    document = json.dumps({
        "q1": [1, -1, 0, -1],
        "q2": [1, 2, 1, 0],
        "op": "add",
        "memory": [0.5, 0.5, 0.5, 0.5],
    })

    dispatcher = OperationDispatcher()
    slot = MemorySlot()

    model = CalcModel.from_json(document)
    q1, q2 = model.operands()
    assert dispatcher.evaluate(model).to_array() == [2.0, 1.0, 1.0, -1.0]

    memory = model.memory_value()
    slot.store(OperandId.FIRST, memory)

    # Recall memory into the second operand and divide
    recalled = dispatcher.apply(parse_action({"type": "recall", "identity": "Q_2"}), slot)
    outcome = dispatcher.compute("divide", q1, recalled)

    assert outcome.kind is ResultKind.OK
    product = dispatcher.dispatch("multiply", outcome.value, recalled)
    np.testing.assert_allclose(product.to_array(), q1.to_array(), atol=1e-12)

    assert slot.action is MemoryAction.RECALLED
    assert slot.identity is OperandId.FIRST


def test_rotation_results_round_trip_through_values():
    """Test values carry engine rotations without loss."""
    a = QuaternionAlgebra().from_axis_angle([0, 1, 0], 0.4)
    b = QuaternionAlgebra().from_axis_angle([1, 0, 1], 1.1)

    composed = OperationDispatcher().dispatch(
        "multiply",
        QuaternionValue.from_array(a.to_array()),
        QuaternionValue.from_array(b.to_array())
    )

    R = QuaternionAlgebra().from_array(composed.to_array()).to_rotation_matrix()
    np.testing.assert_allclose(R, a.to_rotation_matrix() @ b.to_rotation_matrix(), atol=1e-10)
