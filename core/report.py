"""Decoding of ``go list -m -u -json`` output into an update report."""

import json
import re
from collections.abc import Iterable, Iterator

from packaging.version import InvalidVersion, Version

from .models import ManifestInfo, ModuleRecord, UpdateInfo

_WHITESPACE = re.compile(r"\s*")


class ModuleStream:
    """Iterates module records from a stream of concatenated JSON objects.

    Decoding stops at the first value that cannot be read as a module
    record; end of input is the normal way for that to happen. Whatever was
    left undecoded is available as ``trailing`` afterwards.
    """

    def __init__(self, data: bytes):
        self._text = data.decode("utf-8", errors="replace")
        self._decoder = json.JSONDecoder()
        self._pos = 0

    def __iter__(self) -> Iterator[ModuleRecord]:
        text = self._text
        pos = 0
        while True:
            pos = _WHITESPACE.match(text, pos).end()
            self._pos = pos
            if pos >= len(text):
                return
            try:
                obj, end = self._decoder.raw_decode(text, pos)
            except json.JSONDecodeError:
                return
            record = _to_record(obj)
            if record is None:
                return
            pos = end
            yield record

    @property
    def trailing(self) -> str:
        """Undecoded text left after iteration stopped."""
        return self._text[self._pos:]


def _to_record(obj: object) -> ModuleRecord | None:
    if not isinstance(obj, dict):
        return None

    path = obj.get("Path", "")
    version = obj.get("Version", "")
    if not isinstance(path, str) or not isinstance(version, str):
        return None

    update = obj.get("Update")
    if update is not None and not isinstance(update, dict):
        return None

    info = None
    if update is not None:
        update_version = update.get("Version")
        if update_version is None:
            update_version = ""
        update_path = update.get("Path")
        if not isinstance(update_version, str):
            return None
        if update_path is not None and not isinstance(update_path, str):
            return None
        info = UpdateInfo(version=update_version, path=update_path)

    return ModuleRecord(
        path=path,
        version=version,
        update=info,
        indirect=bool(obj.get("Indirect", False)),
    )


def iter_module_records(data: bytes) -> Iterator[ModuleRecord]:
    """Yield module records from raw go list output, in emission order."""
    return iter(ModuleStream(data))


def iter_updates(records: Iterable[ModuleRecord]) -> Iterator[ModuleRecord]:
    """Yield only the records that carry an available update."""
    for record in records:
        if record.has_update:
            yield record


def format_identity(info: ManifestInfo) -> str:
    """Format the module identity header."""
    return f"Module: {info.module}\nGo version: {info.go_version}"


def format_update_line(record: ModuleRecord) -> str:
    """Format a single outdated module as ``path: current -> available``."""
    return f"{record.path}: {record.version} -> {record.update.version}"


def semver_delta(current: str, available: str) -> str:
    """Classify a version bump.

    Args:
        current: Currently resolved version, e.g. v1.2.3
        available: Newer version reported by go list

    Returns:
        Semver delta: "major", "minor", "patch", or "unknown"
    """
    try:
        old_ver = Version(current)
        new_ver = Version(available)
    except InvalidVersion:
        # Pseudo-versions are not PEP 440 compatible
        return "unknown"

    if new_ver > old_ver:
        if new_ver.major > old_ver.major:
            return "major"
        elif new_ver.minor > old_ver.minor:
            return "minor"
        elif new_ver.micro > old_ver.micro:
            return "patch"

    return "unknown"


def format_json_output(info: ManifestInfo, updates: Iterable[ModuleRecord]) -> str:
    """Format identity and updates as a JSON document."""
    reports = []
    for record in updates:
        reports.append({
            "path": record.path,
            "current": record.version,
            "available": record.update.version,
            "semver_delta": semver_delta(record.version, record.update.version),
            "indirect": record.indirect,
        })

    return json.dumps(
        {"module": info.module, "go_version": info.go_version, "updates": reports},
        indent=2,
    )
