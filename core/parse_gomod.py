"""Go go.mod identity parsing."""

from pathlib import Path

from .errors import ManifestReadError
from .models import ManifestInfo


class GoModParser:
    """Parser for the module and go directives of a go.mod file."""

    module_prefix = "module "
    go_prefix = "go "

    def parse(self, content: str) -> ManifestInfo:
        """Parse go.mod content into ManifestInfo.

        Later directives override earlier ones; missing directives leave the
        field empty.
        """
        module = ""
        go_version = ""

        for line in content.splitlines():
            if line.startswith(self.module_prefix):
                module = line[len(self.module_prefix):].strip()
            if line.startswith(self.go_prefix):
                go_version = line[len(self.go_prefix):].strip()

        return ManifestInfo(module=module, go_version=go_version)


def parse_go_mod(content: str) -> ManifestInfo:
    """Parse go.mod content into ManifestInfo.

    Args:
        content: The go.mod file content

    Returns:
        Parsed ManifestInfo object
    """
    parser = GoModParser()
    return parser.parse(content)


def read_manifest(path: Path) -> ManifestInfo:
    """Read and parse a go.mod file from disk."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(f"Cannot read {path.name}: {e}") from e
    return parse_go_mod(content)
