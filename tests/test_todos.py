import pytest

from todolist.errors import AlreadyEmptyError, InvalidIndexError
from todolist.todos import TodoList


@pytest.fixture
def todos():
    t = TodoList()
    for text in ("buy milk", "walk dog", "write report"):
        t.add(text)
    return t


def snapshot(todos):
    return todos.get_tasks()


def test_add_appends_pending_task():
    todos = TodoList()
    task = todos.add("buy milk")
    assert len(todos) == 1
    assert todos[0] is task
    assert task.done is False
    assert task.completed_at is None


def test_add_does_not_validate_text():
    todos = TodoList()
    todos.add("")
    assert todos[0].task == ""


@pytest.mark.parametrize("index", [1, 2, 3])
def test_complete_touches_only_target(todos, index):
    before = snapshot(todos)
    todos.complete(index)
    after = snapshot(todos)
    for pos, (old, new) in enumerate(zip(before, after), start=1):
        if pos == index:
            assert new["done"] is True
            assert new["completed_at"] is not None
            assert new["task"] == old["task"]
            assert new["created_at"] == old["created_at"]
        else:
            assert new == old


def test_complete_twice_overwrites_completion_time(todos):
    first = todos.complete(1).completed_at
    second = todos.complete(1).completed_at
    assert todos[0].done is True
    assert second >= first


def test_edit_replaces_text_only(todos):
    todos.complete(2)
    before = snapshot(todos)[1]
    todos.edit(2, "walk the dog")
    after = snapshot(todos)[1]
    assert after["task"] == "walk the dog"
    assert {k: v for k, v in after.items() if k != "task"} == \
        {k: v for k, v in before.items() if k != "task"}


def test_delete_shifts_later_tasks():
    todos = TodoList()
    todos.add("a")
    todos.add("b")
    removed = todos.delete(1)
    assert removed.task == "a"
    assert len(todos) == 1
    assert todos[0].task == "b"


@pytest.mark.parametrize("index", [0, -1, -10, 4, 100])
@pytest.mark.parametrize("op", ["complete", "edit", "delete"])
def test_out_of_range_index_fails_without_mutation(todos, op, index):
    before = snapshot(todos)
    args = (index, "changed") if op == "edit" else (index,)
    with pytest.raises(InvalidIndexError):
        getattr(todos, op)(*args)
    assert snapshot(todos) == before


@pytest.mark.parametrize("op", ["complete", "edit", "delete"])
def test_index_ops_on_empty_list_fail(op):
    todos = TodoList()
    args = (1, "x") if op == "edit" else (1,)
    with pytest.raises(InvalidIndexError) as excinfo:
        getattr(todos, op)(*args)
    assert excinfo.value.length == 0


def test_check_index(todos):
    todos.check_index(1)
    todos.check_index(3)
    with pytest.raises(InvalidIndexError):
        todos.check_index(4)


def test_delete_all(todos):
    assert todos.delete_all() == 3
    assert len(todos) == 0


def test_delete_all_on_empty_list_fails():
    with pytest.raises(AlreadyEmptyError):
        TodoList().delete_all()


def test_counts_stay_consistent(todos):
    steps = [
        lambda: todos.complete(1),
        lambda: todos.add("call mom"),
        lambda: todos.complete(4),
        lambda: todos.delete(2),
        lambda: todos.complete(1),
        lambda: todos.delete(1),
    ]
    for step in steps:
        step()
        assert todos.count_pending() + todos.count_completed() == len(todos)
    assert todos.count_completed() == 1
    assert todos.count_pending() == 1


def test_filters_preserve_order_and_source(todos):
    todos.complete(1)
    todos.complete(3)
    before = snapshot(todos)

    done = todos.filter_completed()
    pending = todos.filter_pending()

    assert [t.task for t in done] == ["buy milk", "write report"]
    assert [t.task for t in pending] == ["walk dog"]
    assert snapshot(todos) == before
    assert len(todos) == 3


def test_view_names(todos):
    todos.complete(2)
    assert todos.view("all") is todos
    assert [t.task for t in todos.view("done")] == ["walk dog"]
    assert len(todos.view("pending")) == 2
    with pytest.raises(ValueError):
        todos.view("archived")


def test_scenario_add_complete_delete():
    todos = TodoList()
    todos.add("buy milk")
    assert len(todos) == 1
    assert todos[0].done is False
    assert todos[0].completed_at is None

    todos.complete(1)
    assert todos[0].done is True
    assert todos[0].completed_at is not None

    todos.delete(1)
    assert len(todos) == 0


def test_construct_from_entries():
    todos = TodoList([
        {"task": "a", "done": False, "created_at": "2024-01-01T10:00:00", "completed_at": None},
        {"task": "b", "done": True, "created_at": "2024-01-01T10:00:00",
         "completed_at": "2024-01-02T09:00:00"},
    ])
    assert [t.task for t in todos] == ["a", "b"]
    assert todos.count_completed() == 1
    assert str(todos) == "Pending: 1 tasks, Completed: 1 tasks"
