import os
import tempfile
from pathlib import Path

import pytest

_test_root = Path(tempfile.mkdtemp(prefix="hours-tests-"))
os.environ["HOURS_DATABASE_URL"] = f"sqlite:///{_test_root / 'ledger.db'}"
os.environ["HOURS_INVOICE_DIR"] = str(_test_root / "invoices")

from hours.app.core.errors import RenderError  # noqa: E402
from hours.app.db.session import SessionLocal  # noqa: E402


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def render(self, document, output_path):
        self.calls.append((document, output_path))


class FailingRenderer:
    def render(self, document, output_path):
        raise RenderError("failed to generate invoice document: disk full")


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def failing_renderer():
    return FailingRenderer()
