# src/procwatch/redirect.py: Standard stream redirection for the child.
# Opens the configured stdin/stdout/stderr files right before each spawn. A
# stream without a configured path is inherited from the supervisor. Files are
# opened fresh for every spawn so a rotated or deleted log path is recreated.

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Dict, Iterator, Optional

from .errors import RedirectError


@dataclass
class StreamRedirects:
    """Open file objects to hand to the child; None means inherit."""
    stdin: Optional[IO[bytes]] = None
    stdout: Optional[IO[bytes]] = None
    stderr: Optional[IO[bytes]] = None

    def popen_kwargs(self) -> Dict[str, Any]:
        return {"stdin": self.stdin, "stdout": self.stdout, "stderr": self.stderr}


def _open_stream(stack: ExitStack, path: Optional[Path], mode: str, stream: str) -> Optional[IO[bytes]]:
    if path is None:
        return None
    try:
        return stack.enter_context(open(path, mode))
    except OSError as e:
        raise RedirectError(f"Cannot open '{path}' for {stream}: {e.strerror or e}") from e


@contextmanager
def open_redirects(
    stdin: Optional[Path] = None,
    stdout: Optional[Path] = None,
    stderr: Optional[Path] = None,
) -> Iterator[StreamRedirects]:
    """
    Open the redirection targets for one spawn.

    stdin is opened read-only and must already exist. stdout and stderr are
    created or truncated. Everything opened here is closed when the block
    exits; the spawned child holds its own duplicated descriptors.

    Raises:
        RedirectError: If any of the files cannot be opened.
    """
    with ExitStack() as stack:
        yield StreamRedirects(
            stdin=_open_stream(stack, stdin, "rb", "stdin"),
            stdout=_open_stream(stack, stdout, "wb", "stdout"),
            stderr=_open_stream(stack, stderr, "wb", "stderr"),
        )
