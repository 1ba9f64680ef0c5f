"""Tests for the parallel task runner."""

import os
import time

import pytest

from circular_scan.errors import TaskError
from circular_scan.runner import TaskRunner


def _square_after_delay(item):
    value, delay = item
    time.sleep(delay)
    return value * value


def _fail_on_three(item):
    value, delay = item
    time.sleep(delay)
    if value == 3:
        raise ValueError("three is not allowed")
    return value


def _pid(_item):
    return os.getpid()


def _add(a, b):
    return a + b


# First items sleep longest so they finish last.
DELAYED = [(i, 0.05 * (5 - i)) for i in range(6)]


@pytest.fixture(params=[False, True], ids=["threads", "processes"])
def runner(request):
    return TaskRunner(max_workers=3, use_processes=request.param)


def test_results_keep_input_order(runner):
    assert runner.map(_square_after_delay, DELAYED) == [0, 1, 4, 9, 16, 25]


def test_progress_is_monotonic(runner):
    events = []
    runner.map(
        _square_after_delay,
        DELAYED,
        names=[f"file{i}.ts" for i, _ in DELAYED],
        on_progress=lambda name, done, total: events.append((name, done, total)),
    )
    assert [done for _, done, _ in events] == [1, 2, 3, 4, 5, 6]
    assert {total for _, _, total in events} == {6}
    assert sorted(name for name, _, _ in events) == [f"file{i}.ts" for i in range(6)]


def test_empty_input(runner):
    assert runner.map(_square_after_delay, []) == []


def test_worker_error_fails_the_phase(runner):
    with pytest.raises(TaskError) as excinfo:
        runner.map(_fail_on_three, DELAYED, names=[str(i) for i, _ in DELAYED], phase="extract")
    error = excinfo.value
    assert error.phase == "extract"
    assert error.item == "3"
    assert isinstance(error.cause, ValueError)
    assert "extract phase failed" in str(error)


def test_run_single_task(runner):
    assert runner.run(_add, 2, 3, phase="analyze") == 5


def test_run_wraps_errors(runner):
    with pytest.raises(TaskError) as excinfo:
        runner.run(_fail_on_three, (3, 0), phase="glob")
    assert excinfo.value.phase == "glob"
    assert excinfo.value.item is None


def test_processes_are_isolated():
    pids = TaskRunner(max_workers=2, use_processes=True).map(_pid, range(4))
    assert os.getpid() not in pids


def test_default_worker_count():
    assert TaskRunner().max_workers == (os.cpu_count() or 1)
