"""Go module update resolution via ``go list``."""

import asyncio
from pathlib import Path

from .errors import ResolutionError


class GoResolver:
    """Runs ``go list -m -u -json all`` against a working directory."""

    def __init__(self, go_binary: str = "go", env: dict[str, str] | None = None):
        """Initialize Go resolver.

        Args:
            go_binary: Name or path of the go executable
            env: Optional environment for the subprocess (inherits when None)
        """
        self.go_binary = go_binary
        self.env = env

    @property
    def command(self) -> list[str]:
        return [self.go_binary, "list", "-m", "-u", "-json", "all"]

    async def list_modules(self, workdir: Path) -> bytes:
        """Return the raw JSON stream describing every module in the build.

        Args:
            workdir: Directory holding go.mod (and go.sum if available)

        Returns:
            Concatenated JSON objects as emitted by go list
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                cwd=str(workdir),
                env=self.env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        except OSError as e:
            raise ResolutionError(f"Error running go list: {e}") from e

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            raise ResolutionError(f"go list failed (exit {proc.returncode}): {detail}")

        return stdout
