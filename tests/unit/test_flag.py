import threading

import pytest

from healthcheck.flag import HealthFlag

pytestmark = pytest.mark.unit


def test_new_flag_is_false() -> None:
    flag = HealthFlag()

    assert flag.val() is False
    assert str(flag) == "false"
    assert not flag


def test_set_true_and_false() -> None:
    flag = HealthFlag()

    flag.set_false()
    assert flag.val() is False
    assert str(flag) == "false"

    flag.set_true()
    assert flag.val() is True
    assert str(flag) == "true"
    assert flag

    flag.set_false()
    assert flag.val() is False
    assert str(flag) == "false"


@pytest.mark.parametrize("value", [True, False])
def test_set_matches_value(value: bool) -> None:
    flag = HealthFlag()
    flag.set(not value)

    flag.set(value)

    assert flag.val() is value
    assert str(flag) == ("true" if value else "false")


def test_str_reflects_current_value() -> None:
    flag = HealthFlag()
    before = str(flag)

    flag.set_true()

    assert before == "false"
    assert str(flag) == "true"
    assert repr(flag) == "HealthFlag(true)"


def test_concurrent_writers_and_readers() -> None:
    flag = HealthFlag()
    start = threading.Barrier(8)
    observed: list[object] = []
    observed_lock = threading.Lock()

    def writer(value: bool) -> None:
        start.wait()
        for _ in range(2000):
            if value:
                flag.set_true()
            else:
                flag.set_false()
            flag.set(value)

    def reader() -> None:
        start.wait()
        seen = set()
        for _ in range(2000):
            seen.add(flag.val())
            seen.add(str(flag))
        with observed_lock:
            observed.extend(seen)

    threads = [threading.Thread(target=writer, args=(i % 2 == 0,)) for i in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert set(observed) <= {True, False, "true", "false"}

    flag.set_true()
    assert flag.val() is True
    assert str(flag) == "true"
