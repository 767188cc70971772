"""Tests for the structured logger."""

import json

from shared.logger import DecoderLogger


def test_json_file_records(tmp_path):
    log_file = tmp_path / "logs" / "decoder.log"
    log = DecoderLogger(
        "match_index",
        log_level="INFO",
        log_file=log_file,
        json_logs=True,
        console_output=False,
    )

    with log.operation("load"):
        log.info("Indexed %d records", 3, source="matches.csv")
    log.debug("not written")
    for handler in log.underlying.handlers:
        handler.flush()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["message"] == "Indexed 3 records"
    assert entry["logger"] == "decodercore.match_index"
    assert entry["component"] == "match_index"
    assert entry["operation"] == "load"
    assert entry["extra"] == {"source": "matches.csv"}


def test_timed_reports_elapsed():
    log = DecoderLogger("timing", console_output=False)
    with log.timed("work") as timer:
        pass
    assert timer.elapsed >= 0.0


def test_rebuilding_closes_replaced_handlers(tmp_path):
    log_file = tmp_path / "decoder.log"
    first = DecoderLogger("rebuilt", log_file=log_file, console_output=False)
    (old_handler,) = first.underlying.handlers
    first.error("first")

    second = DecoderLogger("rebuilt", log_file=log_file, console_output=False)

    assert old_handler.stream is None
    assert old_handler not in second.underlying.handlers
    assert len(second.underlying.handlers) == 1


def test_plain_text_file_records(tmp_path):
    log_file = tmp_path / "plain.log"
    log = DecoderLogger("plain", log_level="DEBUG", log_file=log_file, console_output=False)
    with log.timed("parse"):
        pass
    for handler in log.underlying.handlers:
        handler.flush()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert "| DEBUG    | decodercore.plain | Started: parse" in lines[0]
    assert "Completed: parse" in lines[1]
