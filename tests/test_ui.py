"""Tests for the Qt worker and the decorative backdrop boundary."""

import logging
from unittest.mock import MagicMock, patch

import pytest

pytest.importorskip("PySide6.QtWidgets")

from replygen.schema import ReplyRequest  # noqa: E402
from ui import backdrop  # noqa: E402
from ui.worker import ReplyWorker  # noqa: E402


def test_worker_emits_finished_with_body():
    send = MagicMock(return_value={"msg": "hi"})
    worker = ReplyWorker(send=send)
    finished, failed = [], []
    worker.finished.connect(finished.append)
    worker.failed.connect(failed.append)

    payload = ReplyRequest(emailContent="Hi")
    worker.run(payload)

    send.assert_called_once_with(payload)
    assert finished == [{"msg": "hi"}]
    assert failed == []


def test_worker_emits_failed_with_exception():
    error = TimeoutError("read timed out")
    worker = ReplyWorker(send=MagicMock(side_effect=error))
    finished, failed = [], []
    worker.finished.connect(finished.append)
    worker.failed.connect(failed.append)

    worker.run(ReplyRequest(emailContent="Hi"))

    assert failed == [error]
    assert finished == []


def test_worker_handles_consecutive_requests():
    """One worker serves every request for the window's lifetime."""
    worker = ReplyWorker(send=lambda payload: payload.emailContent.upper())
    finished = []
    worker.finished.connect(finished.append)

    worker.run(ReplyRequest(emailContent="one"))
    worker.run(ReplyRequest(emailContent="two"))

    assert finished == ["ONE", "TWO"]


def test_worker_uses_http_client_by_default():
    worker = ReplyWorker()
    finished = []
    worker.finished.connect(finished.append)

    with patch("ui.worker.generate_reply", return_value="from client") as send:
        worker.run(ReplyRequest(emailContent="Hi"))

    send.assert_called_once()
    assert finished == ["from client"]


def test_backdrop_skipped_without_mount():
    assert backdrop.start_backdrop(None) is None


def test_backdrop_failure_is_logged_not_raised(caplog):
    caplog.set_level(logging.WARNING, logger="ui.backdrop")
    with patch.object(backdrop, "BirdsBackdrop", side_effect=RuntimeError("no GPU")):
        assert backdrop.start_backdrop(MagicMock()) is None
    assert "Failed to start background animation" in caplog.text
