import json
import logging
from authstate_core.logger import get_logger


def test_logger_writes_json_lines_to_file(tmp_path):
    log_file = tmp_path / "logs" / "authstate.log"
    log = get_logger("AuthState.Test.File", level=logging.DEBUG, to_file=str(log_file))
    log.info("[STORE OPEN] hello")
    for h in log.handlers:
        h.flush()

    line = log_file.read_text().strip().splitlines()[-1]
    doc = json.loads(line)
    assert doc["level"] == "INFO"
    assert doc["name"] == "AuthState.Test.File"
    assert doc["msg"] == "[STORE OPEN] hello"
    assert doc["ts"].endswith("Z")


def test_logger_level_from_env(monkeypatch):
    monkeypatch.setenv("AUTHSTATE_LOG_LEVEL", "warning")
    log = get_logger("AuthState.Test.Env")
    assert log.level == logging.WARNING


def test_handlers_attached_once():
    a = get_logger("AuthState.Test.Once")
    b = get_logger("AuthState.Test.Once")
    assert a is b
    assert len(a.handlers) == 1
