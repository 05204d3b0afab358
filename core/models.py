"""Core data models for modwatch."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RepositoryReference:
    """Owner and name of a hosted repository."""

    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ManifestInfo:
    """Identity declared by a go.mod file."""

    module: str = ""
    go_version: str = ""


@dataclass
class UpdateInfo:
    """Newer version reported for a module."""

    version: str
    path: str | None = None  # only set when the resolver reports one


@dataclass
class ModuleRecord:
    """A single module entry from the resolver output."""

    path: str
    version: str = ""
    update: UpdateInfo | None = None
    indirect: bool = False

    @property
    def has_update(self) -> bool:
        return self.update is not None and bool(self.update.version)


@dataclass
class RetrievalResult:
    """Files a retriever left in the working directory."""

    manifest_path: Path
    lock_path: Path | None = None
    warnings: list[str] = field(default_factory=list)
