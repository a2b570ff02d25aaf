from __future__ import annotations

import pytest

from zencorp.core.exceptions import ValidationError
from zencorp.tasks.model import ChainStep, FileAttachment


def test_chain_step_accepts_camel_and_snake_case():
    assert ChainStep.from_dict({"workerId": "w1", "departmentId": "cat-it"}) == ChainStep("w1", "cat-it")
    assert ChainStep.from_dict({"worker_id": "w2"}) == ChainStep("w2")


@pytest.mark.parametrize("value", ["w1", None, 3, ["w1"]])
def test_chain_step_rejects_non_objects(value):
    with pytest.raises(ValidationError):
        ChainStep.from_dict(value)


def test_attachment_parsing():
    assert FileAttachment.from_dict(None) is None
    assert FileAttachment.from_dict({}) is None
    parsed = FileAttachment.from_dict({"name": "plan.pdf", "size": "12", "data": "QUJD"})
    assert (parsed.name, parsed.type, parsed.size) == ("plan.pdf", "application/octet-stream", 12)

    with pytest.raises(ValidationError):
        FileAttachment.from_dict("plan.pdf")
    with pytest.raises(ValidationError):
        FileAttachment.from_dict({"name": "plan.pdf", "size": "big"})
