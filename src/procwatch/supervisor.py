# src/procwatch/supervisor.py: The supervision loop.
# Launches the configured executable, blocks until it exits, classifies the
# exit status and either stops or restarts it after a fixed delay. Cancellation
# is polled before every spawn and after every abnormal exit; it never
# interrupts a running child. Spawn and redirection failures are fatal.

import logging
import shlex
import signal
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from .cancellation import CancellationToken
from .config import SupervisionConfig
from .errors import ProcwatchError, SpawnError
from .redirect import open_redirects

logger = logging.getLogger(__name__)


# --- Exit outcomes ---

@dataclass(frozen=True)
class NormalExit:
    pid: int


@dataclass(frozen=True)
class AbnormalExit:
    pid: int
    code: int


@dataclass(frozen=True)
class SignalTerminated:
    pid: int
    signal: int

    @property
    def signal_name(self) -> str:
        try:
            return signal.Signals(self.signal).name
        except ValueError:
            return f"signal {self.signal}"


ExitOutcome = Union[NormalExit, AbnormalExit, SignalTerminated]


def classify_exit(pid: int, returncode: int) -> ExitOutcome:
    """
    Convert a Popen return code into an ExitOutcome.

    On POSIX a negative return code -N means the child was killed by signal N.
    """
    if returncode == 0:
        return NormalExit(pid)
    if returncode < 0:
        return SignalTerminated(pid, -returncode)
    return AbnormalExit(pid, returncode)


class StopReason(Enum):
    CHILD_EXITED = "child-exited"
    CHILD_SIGNALLED = "child-signalled"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SupervisionResult:
    reason: StopReason
    spawns: int
    last_outcome: Optional[ExitOutcome] = None

    @property
    def restarts(self) -> int:
        return max(self.spawns - 1, 0)


Spawner = Callable[..., subprocess.Popen]


# --- Supervision loop ---

class Supervisor:
    """
    Runs one child at a time and restarts it after abnormal exits.

    Args:
        config: The launch configuration.
        token: Polled before each spawn; cancellation stops the loop.
        spawner: Popen-compatible factory, injectable for tests.
        pause: Called with the restart delay in seconds. Defaults to
            token.wait, so a cancellation cuts the delay short.
    """

    def __init__(
        self,
        config: SupervisionConfig,
        token: CancellationToken,
        spawner: Spawner = subprocess.Popen,
        pause: Optional[Callable[[float], object]] = None,
    ):
        self.config = config
        self.token = token
        self.spawner = spawner
        self.pause = pause or token.wait

    def spawn(self) -> subprocess.Popen:
        """Open the redirections and start a fresh child."""
        command = self.config.command
        with open_redirects(self.config.stdin, self.config.stdout, self.config.stderr) as redirects:
            try:
                proc = self.spawner(command, **redirects.popen_kwargs())
            except OSError as e:
                raise SpawnError(
                    f"Failed to start '{self.config.executable}': {e.strerror or e}"
                ) from e
        logger.info(f"Started process {proc.pid}: {shlex.join(command)}")
        return proc

    def wait(self, proc: subprocess.Popen) -> ExitOutcome:
        """Block until the child exits. There is no timeout."""
        try:
            returncode = proc.wait()
        except OSError as e:
            raise SpawnError(f"Failed to wait for process {proc.pid}: {e}") from e
        return classify_exit(proc.pid, returncode)

    def run(self) -> SupervisionResult:
        """
        Supervise until the child exits cleanly, is killed by a signal, or
        cancellation is observed.

        Raises:
            ProcwatchError: On any spawn or redirection failure.
        """
        spawns = 0
        outcome: Optional[ExitOutcome] = None
        try:
            while not self.token.is_cancelled():
                proc = self.spawn()
                spawns += 1
                outcome = self.wait(proc)

                if isinstance(outcome, NormalExit):
                    logger.info(f"Process {outcome.pid} exited normally.")
                    logger.info("Exiting supervisor.")
                    return SupervisionResult(StopReason.CHILD_EXITED, spawns, outcome)

                if isinstance(outcome, SignalTerminated):
                    logger.info(
                        f"Process {outcome.pid} was terminated by signal {outcome.signal} "
                        f"({outcome.signal_name})."
                    )
                    logger.info("Exiting supervisor.")
                    return SupervisionResult(StopReason.CHILD_SIGNALLED, spawns, outcome)

                logger.warning(f"Process {outcome.pid} exited with code {outcome.code}.")
                if self.token.is_cancelled():
                    break

                self.pause(self.config.restart_delay)
                if not self.token.is_cancelled():
                    logger.info(f"Restarting after {self.config.restart_delay_ms} ms delay.")
        except ProcwatchError as e:
            logger.error(f"Fatal: {e}")
            raise

        logger.info("Cancellation requested, exiting supervisor.")
        return SupervisionResult(StopReason.CANCELLED, spawns, outcome)
