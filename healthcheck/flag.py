import threading


class HealthFlag:
    """Boolean health state safe to share between threads and tasks.

    Starts out ``False``. Writers call ``set``/``set_true``/``set_false``,
    readers call ``val`` or render it with ``str()``; no external locking is
    needed.
    """

    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value = False
        self._lock = threading.Lock()

    def set(self, value: bool) -> None:
        with self._lock:
            self._value = bool(value)

    def set_true(self) -> None:
        self.set(True)

    def set_false(self) -> None:
        self.set(False)

    def val(self) -> bool:
        with self._lock:
            return self._value

    def __bool__(self) -> bool:
        return self.val()

    def __str__(self) -> str:
        return "true" if self.val() else "false"

    def __repr__(self) -> str:
        return f"HealthFlag({self})"
