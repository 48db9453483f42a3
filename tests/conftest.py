# tests/conftest.py
import pytest

from remotestorage.diagnostics import Diagnostics
from remotestorage.ln.concurrency import TickScheduler


class CapturedLog:
    """Records handed to a Diagnostics log function."""

    def __init__(self):
        self.records: list[tuple[str, str, tuple]] = []

    def __call__(self, name, level, args):
        self.records.append((name, level, args))

    def of(self, name, level=None):
        return [
            args
            for logger_name, logger_level, args in self.records
            if logger_name == name and (level is None or logger_level == level)
        ]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def scheduler():
    """Deterministic tick scheduler; drain with ``scheduler.run_until_idle()``."""
    return TickScheduler()


@pytest.fixture
def captured():
    return CapturedLog()


@pytest.fixture
def diagnostics(captured):
    """Diagnostics context writing every level into ``captured``."""
    return Diagnostics("debug", log_function=captured)
