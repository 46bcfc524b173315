# tests/test_logging_setup.py
import logging

import pytest

from utils import logging_setup


@pytest.fixture()
def clean_root():
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_setup_logging_writes_under_state_dir(tmp_path, monkeypatch, clean_root):
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    monkeypatch.setenv("TASK_PROGRESS_LOG_LEVEL", "debug")

    logfile = logging_setup.setup_logging()
    logging.getLogger("utils.progress").debug("resolved")
    for h in clean_root.handlers:
        h.flush()

    assert logfile == tmp_path / "task-progress" / "logs" / "task-progress.log"
    assert clean_root.level == logging.DEBUG
    assert "resolved" in logfile.read_text(encoding="utf-8")


def test_setup_logging_does_not_stack_handlers(tmp_path, monkeypatch, clean_root):
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    logging_setup.setup_logging()
    count = len(clean_root.handlers)
    logging_setup.setup_logging()
    assert len(clean_root.handlers) == count
