"""Syntax highlighting collaborators for Inkwell.

Code fences tagged with the site's custom language are rendered by an
external program: the code goes in on stdin, highlighted HTML comes back on
stdout. Anything that goes wrong there only costs the highlighting.

Classes:
    SubprocessHighlighter: Runs an external command per code block.
    NullHighlighter: Never highlights; used when no command is available.

Functions:
    find_executable: Locate a program on PATH or inside the project.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Find an executable in PATH or relative to the project root.

    Args:
        name: Program name (e.g. 'cargo') or a path relative to the project.
        project_root: Optional project root used for relative lookups.

    Returns:
        Full path to the executable if found, None otherwise.

    Examples:
        >>> find_executable('cargo')
        '/usr/local/bin/cargo'

        >>> find_executable('highlight/target/release/highlight', Path('/blog'))
        '/blog/highlight/target/release/highlight'
    """
    found = shutil.which(name)
    if found:
        return found

    if project_root is not None:
        local = project_root / name
        if local.is_file():
            return str(local)

    return None


class NullHighlighter:
    """Highlighter that never produces markup."""

    def highlight(self, code: str) -> str | None:
        return None


class SubprocessHighlighter:
    """Highlights code by piping it through an external command.

    Attributes:
        command: Command line to run; the first element is the program.
        project_root: Working directory for the command.
        timeout: Seconds before the command is abandoned.
    """

    def __init__(
        self,
        command: Sequence[str],
        project_root: Path | None = None,
        timeout: float | None = 60.0,
    ):
        """Initialize the highlighter.

        Args:
            command: Program and arguments, e.g. ('cargo', 'run', ...).
            project_root: Working directory, also searched for the program.
            timeout: Optional timeout in seconds for each invocation.
        """
        self.command = tuple(command)
        self.project_root = project_root
        self.timeout = timeout

    def highlight(self, code: str) -> str | None:
        """Run the external command on one code block.

        Args:
            code: Raw code block text.

        Returns:
            Markup printed by the command, or None if it could not run or
            exited with a non-zero status.
        """
        if not self.command:
            return None
        program = find_executable(self.command[0], self.project_root)
        if not program:
            print(f"Highlighter '{self.command[0]}' not found; leaving code plain.")
            return None
        try:
            result = subprocess.run(
                [program, *self.command[1:]],
                input=code,
                capture_output=True,
                text=True,
                cwd=self.project_root,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            print(f"Highlighter failed to run: {exc}")
            return None
        # stderr is ignored: only a non-zero exit counts as failure, so build
        # warnings printed by the highlighter do not drop its output.
        if result.returncode != 0:
            print(f"Highlighter exited with status {result.returncode}; leaving code plain.")
            return None
        return result.stdout
