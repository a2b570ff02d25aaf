from __future__ import annotations

import pytest

from zencorp.core.enums import TaskStatus
from zencorp.core.exceptions import ValidationError
from zencorp.tasks.chain import ChainBuilder, group_workflows
from zencorp.tasks.model import ChainStep, FileAttachment


@pytest.fixture()
def builder(container) -> ChainBuilder:
    return ChainBuilder(
        container.tasks_repo,
        container.employee_service,
        id_factory=lambda n: [f"t{i + 1}" for i in range(n)],
        clock=lambda: 1_000,
    )


def _create(builder, steps, **kwargs):
    params = dict(sender_id="u-1", sender_name="John Manager", title="Audit", description="Quarterly", steps=steps)
    params.update(kwargs)
    return builder.create(**params)


def test_chain_forms_singly_linked_list(builder):
    steps = [ChainStep("w1", "cat-it"), ChainStep("w2", "cat-it"), ChainStep("hr-1")]
    tasks = _create(builder, steps)

    assert [t.task_id for t in tasks] == ["t1", "t2", "t3"]
    for i in range(len(tasks) - 1):
        assert tasks[i].next_chain_task_id == tasks[i + 1].task_id
    assert tasks[-1].next_chain_task_id is None

    assert [t.chain_step for t in tasks] == [1, 2, 3]
    assert tasks[0].parent_task_id is None
    assert all(t.parent_task_id == "t1" for t in tasks[1:])
    assert all(t.is_chain_task for t in tasks)


def test_first_step_waits_for_hr_and_the_rest_are_held(builder):
    tasks = _create(builder, [ChainStep("w1"), ChainStep("w2")])

    assert tasks[0].status == TaskStatus.PENDING_HR
    assert tasks[1].status == TaskStatus.ON_HOLD


def test_multi_step_titles_are_numbered_and_attachment_goes_to_first(builder):
    attachment = FileAttachment(name="brief.pdf", type="application/pdf", size=3, data="abc")
    tasks = _create(builder, [ChainStep("w1"), ChainStep("w2")], attachment=attachment)

    assert [t.title for t in tasks] == ["Audit (Step 1)", "Audit (Step 2)"]
    assert tasks[0].attachment == attachment
    assert tasks[1].attachment is None
    assert [t.to_name for t in tasks] == ["Aziz Karimov", "Lena Orlova"]


def test_single_step_is_not_a_chain(builder):
    (task,) = _create(builder, [ChainStep("w1")])

    assert task.title == "Audit"
    assert task.status == TaskStatus.PENDING_HR
    assert task.is_chain_task is False
    assert task.chain_step is None
    assert task.parent_task_id is None
    assert task.next_chain_task_id is None


def test_chain_is_persisted_in_one_batch(builder, container):
    _create(builder, [ChainStep("w1"), ChainStep("w2")])

    assert container.tasks_repo.create_calls == 1
    assert len(container.tasks_repo.list_all()) == 2


@pytest.mark.parametrize(
    "steps,message",
    [
        ([], "At least one step"),
        ([ChainStep("w1"), ChainStep(None)], "step 2"),
        ([ChainStep("nobody")], "does not exist"),
        ([ChainStep("w3")], "archived"),
        ([ChainStep("w1", "cat-hr")], "not in the selected department"),
    ],
)
def test_invalid_steps_persist_nothing(builder, container, steps, message):
    with pytest.raises(ValidationError, match=message):
        _create(builder, steps)

    assert container.tasks_repo.create_calls == 0
    assert container.tasks_repo.list_all() == []


def test_worker_in_sub_department_is_accepted(builder):
    (task,) = _create(builder, [ChainStep("w2", "cat-it")])
    assert task.to_id == "w2"


def test_title_is_required(builder):
    with pytest.raises(ValidationError):
        _create(builder, [ChainStep("w1")], title="  ")


def test_group_workflows_orders_each_chain(builder, container):
    chain = _create(builder, [ChainStep("w1"), ChainStep("w2"), ChainStep("hr-1")])
    solo_builder = ChainBuilder(
        container.tasks_repo,
        container.employee_service,
        id_factory=lambda n: ["solo"],
        clock=lambda: 2_000,
    )
    single = _create(solo_builder, [ChainStep("w1")])

    grouped = group_workflows(list(reversed(chain)) + single)

    assert [[t.task_id for t in g] for g in grouped] == [["t1", "t2", "t3"]]
