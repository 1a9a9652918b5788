"""Shared plumbing for the template stacks."""

from __future__ import annotations

from pathlib import Path

from projgen.validation.requirements import ToolRunner


class StackError(Exception):
    """Raised when a template generation step fails."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


async def run_step(
    runner: ToolRunner,
    cmd: list[str],
    cwd: Path,
    timeout: float,
) -> str:
    """Run one external step and return its stdout.

    Raises:
        StackError: If the executable is missing or exits non-zero.
    """
    cmd_str = " ".join(cmd)
    try:
        returncode, stdout, stderr = await runner.run(cmd, cwd=cwd, timeout=timeout)
    except FileNotFoundError as exc:
        raise StackError(
            f"{cmd[0]} is not installed: cannot run '{cmd_str}'", command=cmd_str
        ) from exc

    if returncode != 0:
        raise StackError(
            f"Command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )
    return stdout
