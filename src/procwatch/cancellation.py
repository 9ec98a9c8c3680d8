# src/procwatch/cancellation.py: Cancellation token and its signal-driven source.
# The supervision loop only ever polls a CancellationToken. Turning SIGTERM or
# SIGINT into a token write is the job of SignalCancellationSource, which keeps
# the loop itself unaware of OS signal APIs and lets tests cancel by calling
# token.cancel() directly.

import logging
import signal
import threading
from types import FrameType
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class CancellationToken:
    """A one-way flag: once cancelled it stays cancelled."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        """Non-blocking read; no cancellation yet means not cancelled."""
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """
        Sleep for up to `timeout` seconds, returning early on cancellation.

        Returns True if the token is cancelled when the wait ends. Timeouts
        beyond threading.TIMEOUT_MAX are clamped to it.
        """
        return self._event.wait(min(timeout, threading.TIMEOUT_MAX))


class SignalCancellationSource:
    """
    Cancels a token when one of the given OS signals is delivered.

    Used as a context manager: handlers are installed on enter and the previous
    handlers restored on exit. Once closed the source no longer writes the
    token, which keeps whatever state it had.
    """

    def __init__(self, token: CancellationToken, signals: Iterable[int] = DEFAULT_SIGNALS):
        self.token = token
        self.signals = tuple(signals)
        self._previous: Dict[int, object] = {}

    def _handle(self, signum: int, frame: Optional[FrameType]) -> None:
        if not self.token.is_cancelled():
            logger.info(f"Received {signal.Signals(signum).name}, stopping after the current child exits.")
        self.token.cancel()

    def install(self) -> bool:
        """
        Register the handlers. Returns False if that was not possible, in
        which case supervision proceeds without signal-driven cancellation.
        """
        try:
            for signum in self.signals:
                self._previous[signum] = signal.signal(signum, self._handle)
        except (ValueError, OSError) as e:
            logger.error(f"Unable to set signal handler: {e}")
            self.close()
            return False
        return True

    def close(self) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()

    def __enter__(self) -> "SignalCancellationSource":
        self.install()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
