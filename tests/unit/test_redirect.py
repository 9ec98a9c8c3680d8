# tests/unit/test_redirect.py: Unit tests for child stream redirection.

from pathlib import Path

import pytest

from procwatch.errors import ExitCode, RedirectError
from procwatch.redirect import open_redirects


def test_no_paths_inherit_all_streams():
    with open_redirects() as redirects:
        assert redirects.popen_kwargs() == {"stdin": None, "stdout": None, "stderr": None}


def test_opens_modes_and_closes_on_exit(tmp_path: Path):
    stdin_path = tmp_path / "in.txt"
    stdin_path.write_text("data")
    stdout_path = tmp_path / "out.log"
    stdout_path.write_text("stale output")

    with open_redirects(stdin_path, stdout_path, tmp_path / "err.log") as redirects:
        assert redirects.stdin.mode == "rb"
        assert redirects.stdout.mode == "wb"
        assert redirects.stderr.mode == "wb"
        opened = list(redirects.popen_kwargs().values())

    assert all(f.closed for f in opened)
    assert stdout_path.read_text() == ""
    assert (tmp_path / "err.log").exists()


def test_missing_stdin_raises(tmp_path: Path):
    with pytest.raises(RedirectError, match="for stdin") as exc_info:
        with open_redirects(stdin=tmp_path / "nope.txt"):
            pass
    assert exc_info.value.exit_code == ExitCode.REDIRECT_ERROR


def test_unwritable_stdout_raises_and_closes_earlier_files(tmp_path: Path, monkeypatch):
    stdin_path = tmp_path / "in.txt"
    stdin_path.write_text("data")
    opened = []
    real_open = open

    def tracking_open(*args, **kwargs):
        f = real_open(*args, **kwargs)
        opened.append(f)
        return f

    monkeypatch.setattr("procwatch.redirect.open", tracking_open, raising=False)

    with pytest.raises(RedirectError, match="for stdout"):
        with open_redirects(stdin=stdin_path, stdout=tmp_path / "no-dir" / "out.log"):
            pass

    assert len(opened) == 1
    assert opened[0].closed
