import pytest

from guixinstall.commands import (
    CommandError,
    CommandResult,
    run_cmd,
    run_cmd_interactive,
    run_cmd_streaming,
    run_cmd_with_retry,
    run_cmd_with_stdin,
)


def test_run_cmd_echo():
    result = run_cmd(["echo", "hello"])
    assert result.stdout.strip() == "hello"
    assert result.exit_code == 0


def test_run_cmd_failure():
    with pytest.raises(CommandError):
        run_cmd(["false"])


def test_run_cmd_empty_args():
    with pytest.raises(ValueError):
        run_cmd([])


def test_run_cmd_failure_carries_result():
    with pytest.raises(CommandError) as info:
        run_cmd(["sh", "-c", "echo boom >&2; exit 3"])
    assert info.value.result.exit_code == 3
    assert "boom" in str(info.value)
    assert "command failed (exit 3)" in str(info.value)


def test_run_cmd_missing_program():
    with pytest.raises(CommandError, match="failed to execute"):
        run_cmd(["definitely-not-a-real-program-xyz"])


def test_run_cmd_interactive_true():
    assert run_cmd_interactive(["true"]) == 0


def test_run_cmd_interactive_exit_code():
    assert run_cmd_interactive(["sh", "-c", "exit 7"]) == 7


def test_run_cmd_interactive_empty_args():
    with pytest.raises(ValueError):
        run_cmd_interactive([])


def test_run_cmd_with_stdin_echo():
    result = run_cmd_with_stdin(["tr", "a-z", "A-Z"], "hello")
    assert result.stdout.strip() == "HELLO"
    assert result.exit_code == 0


def test_run_cmd_with_stdin_empty_args():
    with pytest.raises(ValueError):
        run_cmd_with_stdin([], "data")


def test_run_cmd_with_stdin_failure():
    with pytest.raises(CommandError):
        run_cmd_with_stdin(["false"], "data")


def test_run_cmd_streaming_echo():
    lines = []
    result = run_cmd_streaming(["echo", "line1"], lines.append)
    assert lines == ["line1"]
    assert result.exit_code == 0


def test_run_cmd_streaming_multiple_lines():
    lines = []
    result = run_cmd_streaming(["printf", "a\\nb\\n"], lines.append)
    assert lines == ["a", "b"]
    assert result.stdout == "a\nb\n"


def test_run_cmd_streaming_captures_stderr():
    result = run_cmd_streaming(["sh", "-c", "echo warn >&2"], lambda _: None)
    assert result.stderr == "warn\n"
    assert result.stdout == ""


def test_run_cmd_streaming_failure():
    with pytest.raises(CommandError):
        run_cmd_streaming(["false"], lambda _: None)


def test_run_cmd_streaming_empty_args():
    with pytest.raises(ValueError):
        run_cmd_streaming([], lambda _: None)


def test_run_cmd_with_retry_immediate_success():
    result = run_cmd_with_retry(["echo", "ok"], 3, ["TLS error"])
    assert result.stdout.strip() == "ok"


def test_run_cmd_with_retry_no_pattern_match(tmp_path):
    counter = tmp_path / "count"
    script = f"echo x >> {counter}; exit 1"
    with pytest.raises(CommandError):
        run_cmd_with_retry(["sh", "-c", script], 3, ["TLS error"])
    assert len(counter.read_text().splitlines()) == 1


def test_run_cmd_with_retry_retries_matching_error(tmp_path):
    counter = tmp_path / "count"
    script = f"echo x >> {counter}; echo 'TLS error' >&2; exit 1"
    with pytest.raises(CommandError) as info:
        run_cmd_with_retry(["sh", "-c", script], 1, ["TLS error"])
    assert "TLS error" in str(info.value)
    assert len(counter.read_text().splitlines()) == 2


def test_command_result_fields():
    result = run_cmd(["sh", "-c", "printf out; printf err >&2"])
    assert result == CommandResult(stdout="out", stderr="err", exit_code=0)