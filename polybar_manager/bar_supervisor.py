"""Bar process supervision.

Terminates running bars, then launches one polybar process per bar
concurrently. Each task relays the process output live while buffering it,
and waits for the process to exit. A failing bar never stops its siblings.
"""

import asyncio
import codecs
import logging
import os
import sys
from pathlib import Path
from typing import Awaitable, Callable, List, Mapping, Optional, TextIO

import psutil

from .models import BarResult, BarStatus, KillScope, SupervisorReport

logger = logging.getLogger(__name__)

# Launch capability: (*argv, env=, stdout=, stderr=) -> process with
# stdout/stderr stream readers and an awaitable wait().
Launcher = Callable[..., Awaitable[asyncio.subprocess.Process]]

# Seconds to wait for user-scoped bars to exit after SIGTERM before SIGKILL
TERMINATE_TIMEOUT = 3.0

# Bytes read from a bar output pipe per relay step
READ_CHUNK_SIZE = 4096


class BarSupervisor:
    """Restarts the bars of a theme and reports how each one ended."""

    def __init__(
        self,
        binary: str = "polybar",
        kill_scope: KillScope = KillScope.SYSTEM,
        launcher: Optional[Launcher] = None,
        stdout_sink: Optional[TextIO] = None,
        stderr_sink: Optional[TextIO] = None,
    ):
        """Initialize supervisor.

        Args:
            binary: Polybar executable
            kill_scope: SYSTEM kills every polybar by name, USER only the current user's
            launcher: Process launch capability (defaults to asyncio.create_subprocess_exec)
            stdout_sink: Shared sink for relayed stdout (defaults to sys.stdout)
            stderr_sink: Shared sink for relayed stderr (defaults to sys.stderr)
        """
        self.binary = binary
        self.kill_scope = kill_scope
        self.launcher = launcher
        self.stdout_sink = stdout_sink
        self.stderr_sink = stderr_sink

    @property
    def process_name(self) -> str:
        return Path(self.binary).name

    def bar_command(self, bar: str) -> List[str]:
        """Argument list launching one bar."""
        return [self.binary, "-r", bar]

    async def run(self, bars: List[str], env: Mapping[str, str]) -> SupervisorReport:
        """Kill running bars, launch the given ones and wait for all of them.

        Args:
            bars: Bar names, one process each (duplicates launch twice)
            env: Full environment of every bar process

        Returns:
            SupervisorReport with one result per bar, in launch order
        """
        await self.kill_existing_bars()

        tasks = [
            asyncio.create_task(self._run_bar(bar, dict(env)), name=f"bar:{bar}")
            for bar in bars
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results = []
        for bar, outcome in zip(bars, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Bar task '{bar}' crashed: {outcome!r}")
                outcome = BarResult(bar=bar, status=BarStatus.FAILED, error=repr(outcome))
            results.append(outcome)

        report = SupervisorReport(results=results)
        logger.info(
            f"Bar batch finished: {len(report.succeeded)} exited cleanly, "
            f"{len(report.failed)} failed"
        )
        return report

    async def kill_existing_bars(self) -> None:
        """Best-effort termination of bars that are already running."""
        if self.kill_scope == KillScope.USER:
            try:
                count = await asyncio.to_thread(_terminate_user_processes, self.process_name)
            except psutil.Error as e:
                logger.error(f"Failed to terminate running {self.process_name} processes: {e}")
                return
            logger.info(f"Terminated {count} running {self.process_name} process(es) owned by uid {os.getuid()}")
            return

        argv = ["killall", "-q", self.process_name]
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            output, _ = await proc.communicate()
        except OSError as e:
            logger.error(f"Failed to kill {self.process_name}: {e}")
            return

        if proc.returncode == 0:
            logger.info(f"Killed running {self.process_name} processes")
        else:
            # killall exits 1 when nothing matched
            logger.debug(
                f"No running {self.process_name} processes killed (exit {proc.returncode}): "
                f"{output.decode('utf-8', errors='replace').strip()}"
            )

    async def _run_bar(self, bar: str, env: Mapping[str, str]) -> BarResult:
        launcher = self.launcher or asyncio.create_subprocess_exec
        stdout_sink = self.stdout_sink or sys.stdout
        stderr_sink = self.stderr_sink or sys.stderr

        logger.info(f"Loading bar '{bar}'")
        try:
            process = await launcher(
                *self.bar_command(bar),
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Starting bar '{bar}' failed: {e}")
            return BarResult(bar=bar, status=BarStatus.START_FAILED, error=str(e))

        stdout_buf: List[str] = []
        stderr_buf: List[str] = []
        relays = await asyncio.gather(
            _relay(process.stdout, stdout_sink, stdout_buf),
            _relay(process.stderr, stderr_sink, stderr_buf),
            return_exceptions=True,
        )
        capture_errors = [r for r in relays if isinstance(r, Exception)]
        if capture_errors:
            logger.error(f"Failed to capture output of bar '{bar}': {capture_errors}")

        exit_code = await process.wait()
        stdout, stderr = "".join(stdout_buf), "".join(stderr_buf)

        if exit_code != 0:
            logger.error(f"Bar '{bar}' exited with status {exit_code}")
            return BarResult(
                bar=bar,
                status=BarStatus.FAILED,
                exit_code=exit_code,
                stdout=stdout,
                stderr=stderr,
                error=f"exited with status {exit_code}",
            )

        logger.info(f"Bar '{bar}' exited")
        return BarResult(bar=bar, status=BarStatus.EXITED, exit_code=0, stdout=stdout, stderr=stderr)


async def _relay(stream: Optional[asyncio.StreamReader], sink: Optional[TextIO], buffer: List[str]) -> None:
    """Copy a process stream into the shared sink and a buffer until EOF.

    Reads fixed-size chunks rather than lines so an arbitrarily long line
    never stops the pipe from being drained.
    """
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        text = decoder.decode(chunk, final=not chunk)
        if text:
            buffer.append(text)
            if sink is not None:
                try:
                    sink.write(text)
                    sink.flush()
                except (OSError, ValueError) as e:
                    # sink gone, keep draining into the buffer
                    logger.error(f"Failed to relay bar output, buffering only: {e}")
                    sink = None
        if not chunk:
            break


def _terminate_user_processes(name: str) -> int:
    """SIGTERM processes called `name` owned by the current user, SIGKILL stragglers."""
    uid = os.getuid()
    targets = []

    for proc in psutil.process_iter(["name", "uids"]):
        try:
            if proc.info["name"] != name:
                continue
            uids = proc.info["uids"]
            if uids is None or uids.real != uid:
                continue
            proc.terminate()
            targets.append(proc)
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.debug(f"Skipping process {proc.pid}: {e}")

    _, alive = psutil.wait_procs(targets, timeout=TERMINATE_TIMEOUT)
    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass

    return len(targets)
