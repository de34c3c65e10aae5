"""
Shared Test Fixtures
====================

Fixtures used by both the header and CLI test modules.
"""

import io
from pathlib import Path

import pytest


class FailingCloseFile(io.BytesIO):
    """
    In-memory file whose first close() raises OSError.

    The buffer is still released on that first call, so garbage
    collection does not raise a second time.
    """

    def __init__(self, data: bytes):
        super().__init__(data)
        self.close_attempts = 0

    def close(self) -> None:
        self.close_attempts += 1
        super().close()
        if self.close_attempts == 1:
            raise OSError("device went away")


@pytest.fixture
def failing_close(monkeypatch) -> list[FailingCloseFile]:
    """
    Make every binary read-mode Path.open return a FailingCloseFile.

    Other modes (e.g. write_bytes in a test) use the real Path.open.
    Returns the list of handles opened, for inspection.
    """
    opened: list[FailingCloseFile] = []
    real_open = Path.open

    def fake_open(self, mode="r", *args, **kwargs):
        if mode != "rb":
            return real_open(self, mode, *args, **kwargs)
        with open(self, "rb") as f:
            handle = FailingCloseFile(f.read())
        opened.append(handle)
        return handle

    monkeypatch.setattr(Path, "open", fake_open)
    return opened
