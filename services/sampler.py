"""Sampling of kernel_task CPU usage through the ``top`` utility."""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

TARGET_PROCESS = "kernel_task"

# Two samples one second apart scoped to pid 0. The first sample reports CPU
# consumed since boot; only the second reflects current load.
TOP_COMMAND: tuple[str, ...] = ("top", "-l", "2", "-s", "1", "-pid", "0")

_CPU_FIELD_INDEX = 2

Runner = Callable[[Sequence[str]], "subprocess.CompletedProcess[str]"]


class SampleError(RuntimeError):
    """Base class for failures to obtain a CPU sample."""


class SampleExecutionError(SampleError):
    """The sampling utility could not be launched or exited abnormally."""


class SampleParseError(SampleError):
    """The sampling utility produced output of an unexpected shape."""


def _run_command(command: Sequence[str]) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(
        list(command),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )


def parse_cpu_percent(output: str, process_name: str = TARGET_PROCESS) -> float:
    """Extract the CPU percentage from the last line naming ``process_name``.

    The third whitespace-delimited field holds the percentage, optionally
    suffixed with ``%``. When no line names the process the usage is reported
    as ``0.0``: kernel_task always exists, so absence means it rounded away.
    """
    last_line: Optional[str] = None
    for line in output.splitlines():
        if process_name in line:
            last_line = line

    if last_line is None:
        logger.debug(
            "Process line not present in sampler output",
            extra={"reason": f"{process_name} missing"},
        )
        return 0.0

    fields = last_line.split()
    if len(fields) <= _CPU_FIELD_INDEX:
        raise SampleParseError(
            f"Expected at least {_CPU_FIELD_INDEX + 1} fields in {last_line.strip()!r}"
        )

    raw_value = fields[_CPU_FIELD_INDEX].removesuffix("%")
    try:
        return float(raw_value)
    except ValueError as exc:
        raise SampleParseError(f"Invalid CPU value {raw_value!r} for {process_name}") from exc


class TopSampler:
    """Runs ``top`` once per call and returns the steady-state CPU percentage.

    Each call blocks for roughly the utility's one-second sampling interval.
    """

    def __init__(
        self,
        command: Sequence[str] = TOP_COMMAND,
        process_name: str = TARGET_PROCESS,
        runner: Optional[Runner] = None,
    ) -> None:
        self.command = tuple(command)
        self.process_name = process_name
        self._runner = runner or _run_command

    def sample(self) -> float:
        try:
            result = self._runner(self.command)
        except OSError as exc:
            raise SampleExecutionError(f"Unable to run {self.command[0]}: {exc}") from exc

        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise SampleExecutionError(detail)

        return parse_cpu_percent(result.stdout or "", self.process_name)
