"""
Tests for the command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from charactercount.cli import FileTextSource, cli


@pytest.fixture
def runner():
    return CliRunner()


def test_count_under_limit(runner):
    result = runner.invoke(cli, ['count', 'Hello', '--maxlength', '10'])
    assert result.exit_code == 0
    assert "5 / 10 characters" in result.output
    assert "You have 5 characters remaining (shown)" in result.output


def test_count_over_limit_exits_1(runner):
    result = runner.invoke(cli, ['count', 'This is too long', '--maxlength', '10'])
    assert result.exit_code == 1
    assert "You have 6 characters too many" in result.output


def test_count_words_from_stdin(runner):
    result = runner.invoke(cli, ['count', '--maxwords', '5'], input="Hello world\n")
    assert result.exit_code == 0
    assert "2 / 5 words" in result.output
    assert "You have 3 words remaining" in result.output


def test_count_threshold_hidden(runner):
    result = runner.invoke(cli, ['count', '1234567', '--maxlength', '10', '--threshold', '80'])
    assert "(hidden)" in result.output


def test_count_json_output(runner):
    result = runner.invoke(cli, ['count', 'Hello', '--maxlength', '10', '--format', 'json'])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["remaining"] == 5
    assert data["mode"] == "characters"


def test_count_without_limit(runner):
    result = runner.invoke(cli, ['count', 'Hello world'])
    assert result.exit_code == 0
    assert "11 characters (no limit)" in result.output


def test_count_invalid_threshold_exits_2(runner):
    result = runner.invoke(cli, ['count', 'a', '--maxlength', '10', '--threshold', '150'])
    assert result.exit_code == 2
    assert "threshold" in result.output


def test_hint(runner):
    result = runner.invoke(cli, ['hint', '--maxwords', '50'])
    assert result.exit_code == 0
    assert result.output.strip() == "You can enter up to 50 words"


def test_hint_requires_limit(runner):
    result = runner.invoke(cli, ['hint'])
    assert result.exit_code == 2


def test_watch_requires_limit(runner, tmp_path):
    path = tmp_path / "field.txt"
    path.write_text("text", encoding="utf-8")
    result = runner.invoke(cli, ['watch', str(path), '--duration', '0'])
    assert result.exit_code == 2


def test_watch_reports_initial_feedback(runner, tmp_path):
    path = tmp_path / "field.txt"
    path.write_text("Hello", encoding="utf-8")
    result = runner.invoke(cli, ['watch', str(path), '--maxlength', '10', '--duration', '0'])
    assert result.exit_code == 0
    assert "You have 5 characters remaining" in result.output


def test_file_text_source_reads_live_content(tmp_path):
    path = tmp_path / "field.txt"
    path.write_text("first", encoding="utf-8")
    source = FileTextSource(path)
    assert source.get_value() == "first"

    path.write_text("second", encoding="utf-8")
    assert source.get_value() == "second"


def test_file_text_source_missing_file_is_empty(tmp_path):
    assert FileTextSource(tmp_path / "missing.txt").get_value() == ""


def test_file_text_source_keeps_last_readable_content(tmp_path):
    path = tmp_path / "field.txt"
    path.write_text("Hello", encoding="utf-8")
    source = FileTextSource(path)

    path.write_bytes(b"Hello \xff\xfe")
    assert source.get_value() == "Hello"

    path.write_text("Hello again", encoding="utf-8")
    assert source.get_value() == "Hello again"


def test_watch_rejects_non_utf8_file(runner, tmp_path):
    path = tmp_path / "field.bin"
    path.write_bytes(b"Hello \xff\xfe")
    result = runner.invoke(cli, ['watch', str(path), '--maxlength', '10', '--duration', '0'])
    assert result.exit_code == 2
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "not valid UTF-8" in result.output


def test_invalid_environment_setting_exits_2(runner):
    result = runner.invoke(
        cli, ['count', 'Hello', '--maxlength', '10'],
        env={"CHARACTER_COUNT_POLL_INTERVAL_MS": "soon"},
    )
    assert result.exit_code == 2
    assert "CHARACTER_COUNT_POLL_INTERVAL_MS" in result.output
