"""Temporary repository clones."""

import logging
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CLONE_TIMEOUT = 120.0


class CloneError(RuntimeError):
    """Raised when a repository cannot be cloned."""


@contextmanager
def scratch_clone(
    clone_url: str, timeout: float | None = DEFAULT_CLONE_TIMEOUT
) -> Iterator[Path]:
    """Shallow-clone a repository into a temporary directory.

    The directory is removed when the context exits, whether the clone or
    the caller's work succeeded or not.

    Args:
        clone_url: URL passed to `git clone`.
        timeout: Seconds allowed for the clone.

    Yields:
        Path of the cloned working tree.

    Raises:
        CloneError: If there is no time left, git is missing, the clone
            times out or git exits non-zero.
    """
    if timeout is not None and timeout <= 0:
        raise CloneError(f"No time left to clone {clone_url}")

    temp_dir = Path(tempfile.mkdtemp(prefix="repo-trust-"))
    work_tree = temp_dir / "repo"

    try:
        if shutil.which("git") is None:
            raise CloneError("git executable not found")

        try:
            result = subprocess.run(
                ["git", "clone", "--depth", "1", "--quiet", clone_url, str(work_tree)],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise CloneError(f"Cloning {clone_url} timed out") from e

        if result.returncode != 0:
            raise CloneError(
                f"Failed to clone {clone_url}: {result.stderr.strip()}"
            )

        logger.debug("Cloned %s into %s", clone_url, work_tree)
        yield work_tree
    finally:
        # Clean up temporary directory
        shutil.rmtree(temp_dir, ignore_errors=True)
