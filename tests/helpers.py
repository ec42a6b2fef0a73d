"""Fakes shared by the test modules."""

from collections import namedtuple

from topmem.models import ProcessSample

FakeMemInfo = namedtuple("FakeMemInfo", ["rss", "vms", "data"])


class FakeProc:
    def __init__(self, info):
        self.info = info


def proc(pid, rss_kb, vms_kb=0, data_kb=0, cmdline=None, name="proc"):
    """A psutil-like process with its info dict already populated."""
    return FakeProc({
        "pid": pid,
        "name": name,
        "cmdline": cmdline if cmdline is not None else [f"/usr/bin/{name}"],
        "memory_info": FakeMemInfo(rss_kb * 1024, vms_kb * 1024, data_kb * 1024),
    })


def sample(pid, resident_kb, command=None):
    return ProcessSample(
        pid=pid,
        resident_kb=resident_kb,
        nominal_size_kb=resident_kb // 2,
        virtual_kb=resident_kb * 4,
        command=command or f"cmd-{pid} --flag",
    )


class FixedSource:
    """Returns the same snapshot on every capture."""

    def __init__(self, snapshot):
        self.snapshot = list(snapshot)
        self.calls = 0

    def capture(self):
        self.calls += 1
        return list(self.snapshot)


class FailingSource:
    def __init__(self, exc):
        self.exc = exc

    def capture(self):
        raise self.exc


class FakeClock:
    """Advances by step seconds on every call."""

    def __init__(self, start=1700000000, step=5):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now += self.step
        return current


class NoWaitEvent:
    """threading.Event stand in that never blocks and records the waits."""

    def __init__(self):
        self.waits = []
        self._set = False

    def is_set(self):
        return self._set

    def set(self):
        self._set = True

    def wait(self, timeout=None):
        self.waits.append(timeout)
        return self._set


class StopAfterSource(FixedSource):
    """Calls stop() during the limit-th capture; that tick still completes."""

    def __init__(self, snapshot, limit, stop=None):
        super().__init__(snapshot)
        self.limit = limit
        self.stop = stop

    def capture(self):
        snapshot = super().capture()
        if self.calls >= self.limit and self.stop is not None:
            self.stop()
        return snapshot
