import threading

import pytest

from wallpack.framework.errors import BuildFailedError
from wallpack.framework.tasks import run_supervised


def test_all_tasks_succeed():
    results = run_supervised([(f"t{i}", lambda i=i: i * i) for i in range(10)], workers=3)
    assert results == {f"t{i}": i * i for i in range(10)}


def test_no_new_tasks_after_first_failure():
    started: list[str] = []

    def boom():
        started.append("first")
        raise RuntimeError("boom")

    def later(name):
        started.append(name)

    tasks = [("first", boom), ("second", lambda: later("second")), ("third", lambda: later("third"))]
    with pytest.raises(BuildFailedError) as excinfo:
        run_supervised(tasks, workers=1)

    assert started == ["first"]
    assert [name for name, _ in excinfo.value.failures] == ["first"]
    assert "boom" in str(excinfo.value)


def test_in_flight_tasks_finish_after_failure():
    release = threading.Event()
    finished: list[str] = []

    def slow():
        release.wait(timeout=5)
        finished.append("slow")

    def fail():
        release.set()
        raise ValueError("bad entry")

    with pytest.raises(BuildFailedError) as excinfo:
        run_supervised([("slow", slow), ("fail", fail)], workers=2)

    assert finished == ["slow"]
    assert [name for name, _ in excinfo.value.failures] == ["fail"]


def test_workers_must_be_positive():
    with pytest.raises(ValueError):
        run_supervised([], workers=0)
