from __future__ import annotations

import logging

import pytest

from pdf_factory.observers import LoggingObserver, RecordingObserver
from pdf_factory.types import CipherMode, RewriteStage, SecurityProfile


@pytest.fixture()
def logger() -> logging.Logger:
    logger = logging.getLogger("pdf_factory.tests.observers")
    logger.propagate = True
    logger.setLevel(logging.DEBUG)
    return logger


def test_downgrade_is_logged_as_warning(logger: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    observer = LoggingObserver(logger)

    with caplog.at_level(logging.WARNING, logger=logger.name):
        observer.downgrade_applied("AES_256", CipherMode.AES_128)

    assert [record.levelno for record in caplog.records] == [logging.WARNING]
    assert "AES-128" in caplog.records[0].getMessage()
    assert "128-bit key" in caplog.records[0].getMessage()


def test_failure_is_logged_as_error(logger: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    observer = LoggingObserver(logger)

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        observer.operation_failed("rewrite", RewriteStage.OPENED, ValueError("boom"))

    assert caplog.records[0].levelno == logging.ERROR
    assert "opened" in caplog.records[0].getMessage()


def test_profile_is_logged(logger: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    observer = LoggingObserver(logger)

    with caplog.at_level(logging.INFO, logger=logger.name):
        observer.profile_extracted("doc.pdf", SecurityProfile())

    assert "doc.pdf" in caplog.text
    assert "encrypted=False" in caplog.text


def test_recording_observer_keeps_order() -> None:
    observer = RecordingObserver()
    observer.stage_reached("rewrite", RewriteStage.OPENED)
    observer.operation_finalized("rewrite", 10)
    observer.cleanup_failed("/tmp/x", OSError("busy"))

    assert observer.names() == ["stage_reached", "operation_finalized", "cleanup_failed"]
    assert observer.events[1] == ("operation_finalized", ("rewrite", 10))
