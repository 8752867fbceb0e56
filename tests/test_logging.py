"""Structured logger tests."""

import io
import json

from drivegraph.core.logging import StructuredLogger, get_logger, set_log_level


def _records(buf: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in buf.getvalue().splitlines()]


def test_records_are_json_lines():
    buf = io.StringIO()
    log = StructuredLogger("test", output=buf)
    log.info("graph saved", config_id="x", n_nodes=3)
    (rec,) = _records(buf)
    assert rec["level"] == "INFO"
    assert rec["message"] == "graph saved"
    assert rec["logger"] == "test"
    assert rec["config_id"] == "x"
    assert rec["n_nodes"] == 3


def test_level_filtering():
    buf = io.StringIO()
    log = StructuredLogger("test", output=buf, min_level="WARN")
    log.debug("hidden")
    log.info("hidden")
    log.warn("shown")
    log.error("shown")
    assert [r["level"] for r in _records(buf)] == ["WARN", "ERROR"]


def test_timer_logs_elapsed():
    buf = io.StringIO()
    log = StructuredLogger("test", output=buf, min_level="DEBUG")
    with log.timer("recompute", n_nodes=4):
        pass
    (rec,) = _records(buf)
    assert rec["message"] == "recompute completed"
    assert rec["elapsed_ms"] >= 0
    assert rec["n_nodes"] == 4


def test_set_log_level_applies_to_new_and_existing():
    existing = get_logger("drivegraph.test.existing")
    set_log_level("debug")
    assert existing.level == "DEBUG"
    assert get_logger("drivegraph.test.new").level == "DEBUG"
    set_log_level("bogus")
    assert existing.level == "INFO"


def test_default_output_is_stderr(capsys):
    StructuredLogger("test").warn("careful")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert json.loads(captured.err)["message"] == "careful"
