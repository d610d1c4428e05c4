from __future__ import annotations

import subprocess
from typing import Sequence

import pytest

from services.sampler import (
    SampleExecutionError,
    SampleParseError,
    TopSampler,
    parse_cpu_percent,
)

TWO_SAMPLE_OUTPUT = """\
Processes: 512 total, 3 running, 509 sleeping, 2841 threads
Load Avg: 2.10, 2.31, 2.40  CPU usage: 7.12% user, 5.30% sys, 87.56% idle

PID    COMMAND      %CPU  TIME     #TH   #WQ  #PORT MEM
0      kernel_task  187.4 09:12:44 520/12 0   0     1024K
Processes: 512 total, 2 running, 510 sleeping, 2840 threads
Load Avg: 2.10, 2.31, 2.40  CPU usage: 3.02% user, 4.11% sys, 92.85% idle

PID    COMMAND      %CPU  TIME     #TH   #WQ  #PORT MEM
0      kernel_task  12.3% 09:12:44 520/12 0   0     1024K
"""


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0):
    def runner(command: Sequence[str]) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(list(command), returncode, stdout, stderr)

    return runner


def test_parse_takes_second_sample() -> None:
    assert parse_cpu_percent(TWO_SAMPLE_OUTPUT) == 12.3


def test_parse_single_sample() -> None:
    output = "PID COMMAND %CPU\n0   kernel_task 4.5\n"

    assert parse_cpu_percent(output) == 4.5


def test_parse_missing_process_line_is_zero() -> None:
    output = "PID COMMAND %CPU\n1   launchd 0.1\n"

    assert parse_cpu_percent(output) == 0.0
    assert parse_cpu_percent("") == 0.0


def test_parse_short_line_raises() -> None:
    with pytest.raises(SampleParseError):
        parse_cpu_percent("0 kernel_task\n")


def test_parse_non_numeric_value_raises() -> None:
    with pytest.raises(SampleParseError) as exc_info:
        parse_cpu_percent("0 kernel_task n/a%\n")

    assert "n/a" in str(exc_info.value)


def test_sampler_runs_two_sample_top_for_pid_zero() -> None:
    seen: list[tuple[str, ...]] = []

    def runner(command: Sequence[str]) -> subprocess.CompletedProcess[str]:
        seen.append(tuple(command))
        return subprocess.CompletedProcess(list(command), 0, TWO_SAMPLE_OUTPUT, "")

    sampler = TopSampler(runner=runner)

    assert sampler.sample() == 12.3
    assert seen == [("top", "-l", "2", "-s", "1", "-pid", "0")]


def test_sampler_nonzero_exit_carries_stderr() -> None:
    sampler = TopSampler(
        runner=_completed(stderr="top: this operation requires privileged access\n", returncode=1)
    )

    with pytest.raises(SampleExecutionError) as exc_info:
        sampler.sample()

    assert "privileged" in str(exc_info.value)


def test_sampler_nonzero_exit_without_stderr() -> None:
    sampler = TopSampler(runner=_completed(returncode=2))

    with pytest.raises(SampleExecutionError, match="exit status 2"):
        sampler.sample()


def test_sampler_launch_failure() -> None:
    def runner(command: Sequence[str]) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(2, "No such file or directory", command[0])

    with pytest.raises(SampleExecutionError, match="Unable to run top"):
        TopSampler(runner=runner).sample()
