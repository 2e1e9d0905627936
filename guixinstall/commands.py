"""Running external programs with captured or streamed output."""

from __future__ import annotations

import subprocess
import sys
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

RETRY_DELAYS = (0, 60, 300)


@dataclass
class CommandResult:
    """Output and exit code of a finished command."""

    stdout: str
    stderr: str
    exit_code: int


class CommandError(Exception):
    """Raised when a command cannot be started or exits unsuccessfully."""

    def __init__(self, message: str, result: CommandResult | None = None) -> None:
        super().__init__(message)
        self.result = result


def _split(args: Sequence[str], caller: str) -> list[str]:
    argv = list(args)
    if not argv:
        raise ValueError(f"{caller} called with empty args")
    return argv


def _exit_code(returncode: int) -> int:
    return -1 if returncode < 0 else returncode


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _spawn_error(argv: list[str], exc: OSError) -> CommandError:
    return CommandError(f"failed to execute: {' '.join(argv)}: {exc}")


def _check(argv: list[str], result: CommandResult) -> CommandResult:
    if result.exit_code != 0:
        raise CommandError(
            f"command failed (exit {result.exit_code}): {' '.join(argv)}\n"
            f"stderr: {result.stderr.strip()}",
            result,
        )
    return result


def run_cmd(args: Sequence[str]) -> CommandResult:
    """Run a command, capture its output and raise CommandError on failure."""
    argv = _split(args, "run_cmd")
    try:
        completed = subprocess.run(
            argv, stdin=subprocess.DEVNULL, capture_output=True, check=False
        )
    except OSError as exc:
        raise _spawn_error(argv, exc) from exc
    return _check(
        argv,
        CommandResult(
            stdout=_decode(completed.stdout),
            stderr=_decode(completed.stderr),
            exit_code=_exit_code(completed.returncode),
        ),
    )


def run_cmd_interactive(args: Sequence[str]) -> int:
    """Run a command attached to the terminal and return its exit code."""
    argv = _split(args, "run_cmd_interactive")
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as exc:
        raise _spawn_error(argv, exc) from exc
    return _exit_code(completed.returncode)


def run_cmd_with_stdin(args: Sequence[str], stdin_data: str) -> CommandResult:
    """Run a command with ``stdin_data`` written to its standard input."""
    argv = _split(args, "run_cmd_with_stdin")
    try:
        completed = subprocess.run(
            argv, input=stdin_data.encode(), capture_output=True, check=False
        )
    except OSError as exc:
        raise _spawn_error(argv, exc) from exc
    return _check(
        argv,
        CommandResult(
            stdout=_decode(completed.stdout),
            stderr=_decode(completed.stderr),
            exit_code=_exit_code(completed.returncode),
        ),
    )


def run_cmd_with_retry(
    args: Sequence[str], max_retries: int, retry_patterns: Sequence[str]
) -> CommandResult:
    """Run a command, retrying while its error message contains a retry pattern.

    Waits 0s, 60s and then 300s between successive attempts.
    """
    for attempt in range(max_retries + 1):
        try:
            return run_cmd(args)
        except CommandError as err:
            message = str(err)
            retryable = any(pattern in message for pattern in retry_patterns)
            if not retryable or attempt == max_retries:
                raise
            delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
            if delay > 0:
                first_line = message.splitlines()[0] if message else message
                print(
                    f"Retryable error (attempt {attempt + 1}/{max_retries}), "
                    f"waiting {delay}s: {first_line}",
                    file=sys.stderr,
                )
                time.sleep(delay)
    raise CommandError("run_cmd_with_retry: no attempts made")


def run_cmd_streaming(
    args: Sequence[str], on_line: Callable[[str], None]
) -> CommandResult:
    """Run a command, calling ``on_line`` for each line of its standard output."""
    argv = _split(args, "run_cmd_streaming")
    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as exc:
        raise _spawn_error(argv, exc) from exc

    stderr_chunks: list[bytes] = []

    def _drain_stderr() -> None:
        assert proc.stderr is not None
        stderr_chunks.append(proc.stderr.read())

    reader = threading.Thread(target=_drain_stderr, daemon=True)
    reader.start()

    stdout_lines: list[str] = []
    try:
        assert proc.stdout is not None
        for raw in proc.stdout:
            raw = raw.removesuffix(b"\n").removesuffix(b"\r")
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise CommandError("failed to read stdout line") from exc
            on_line(line)
            stdout_lines.append(line + "\n")
    except BaseException:
        proc.kill()
        proc.wait()
        reader.join()
        raise
    finally:
        if proc.stdout is not None:
            proc.stdout.close()

    returncode = proc.wait()
    reader.join()
    if proc.stderr is not None:
        proc.stderr.close()

    return _check(
        argv,
        CommandResult(
            stdout="".join(stdout_lines),
            stderr=_decode(b"".join(stderr_chunks)),
            exit_code=_exit_code(returncode),
        ),
    )