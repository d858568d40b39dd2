"""Change detection by polling modification times.

A scan walks every watch root, finds the newest watched file, and compares
its modification time against the shared Watermark. Polling is preferred
over native file watchers for cross-platform reliability.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from vigil.logging import get_logger
from vigil.watching.watermark import Watermark

log = get_logger("watching")

WATCHED_EXTENSIONS: frozenset[str] = frozenset({"tera", "html", "css", "scss", "js", "ts"})

DEFAULT_MAX_DEPTH = 32


class ChangeCategory(Enum):
    """Kind of file that changed, derived from its extension."""

    TEMPLATE = "template"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    FILE = "file"

    @property
    def label(self) -> str:
        return self.value.capitalize()


_CATEGORY_BY_EXTENSION = {
    "tera": ChangeCategory.TEMPLATE,
    "html": ChangeCategory.TEMPLATE,
    "css": ChangeCategory.STYLESHEET,
    "scss": ChangeCategory.STYLESHEET,
    "js": ChangeCategory.SCRIPT,
    "ts": ChangeCategory.SCRIPT,
}


def _extension(path: str | Path) -> str:
    return Path(path).suffix.lstrip(".").lower()


def categorize(path: str | Path) -> ChangeCategory:
    """Classify a path as template, stylesheet, script, or generic file."""
    return _CATEGORY_BY_EXTENSION.get(_extension(path), ChangeCategory.FILE)


@dataclass(frozen=True)
class WatchRoot:
    """A directory polled for changes to files with the given extensions."""

    path: Path
    extensions: frozenset[str] = field(default=WATCHED_EXTENSIONS)

    def watches(self, file_path: Path) -> bool:
        return _extension(file_path) in self.extensions


@dataclass(frozen=True)
class ChangeEvent:
    """The newest watched file found by a scan that beat the watermark."""

    path: str
    mtime: int
    category: ChangeCategory

    @property
    def message(self) -> str:
        """Text frame pushed to clients."""
        return f"reload:{self.path}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "mtime": self.mtime,
            "category": self.category.value,
        }


def watch_roots_for(project_root: str | Path, roots: Iterable[str | Path]) -> list[WatchRoot]:
    """Build WatchRoots from configured paths, relative ones under project_root."""
    base = Path(project_root)
    return [WatchRoot(base / root) for root in roots]


class ChangeDetector:
    """Reports the newest watched file once it is newer than the watermark.

    Example:
        detector = ChangeDetector([WatchRoot(Path("templates"))], Watermark())
        event = detector.scan()
        if event:
            print(event.message)  # reload:templates/index.html
    """

    def __init__(
        self,
        roots: Iterable[WatchRoot],
        watermark: Watermark,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._roots = list(roots)
        self._watermark = watermark
        self._max_depth = max_depth

    @property
    def roots(self) -> list[WatchRoot]:
        return list(self._roots)

    @property
    def watermark(self) -> Watermark:
        return self._watermark

    def latest_mtime(self) -> tuple[int, str | None]:
        """Walk all roots without touching the watermark.

        Returns:
            (newest mtime in whole seconds, path that had it). (0, None)
            when no watched file exists.
        """
        latest = 0
        latest_path: str | None = None

        for root in self._roots:
            if not root.path.is_dir():
                continue
            visited: set[Path] = set()
            for path, mtime in self._walk(root, root.path, 0, visited):
                if mtime > latest:
                    latest = mtime
                    latest_path = str(path)

        return latest, latest_path

    def scan(self) -> ChangeEvent | None:
        """Check whether any watched file changed since the watermark.

        The watermark is advanced before the event is returned, so a scan
        running right after this one will not report the same change.
        Never raises for filesystem problems; unreadable entries are skipped.
        """
        latest, latest_path = self.latest_mtime()
        if latest_path is None:
            return None

        if not self._watermark.advance(latest):
            return None

        event = ChangeEvent(path=latest_path, mtime=latest, category=categorize(latest_path))
        log.debug(
            "%s change detected: %s at time %d",
            event.category.label,
            event.path,
            event.mtime,
        )
        return event

    def _walk(
        self,
        root: WatchRoot,
        directory: Path,
        depth: int,
        visited: set[Path],
    ) -> Iterable[tuple[Path, int]]:
        """Yield (path, mtime) for watched files under directory."""
        try:
            real = directory.resolve()
        except OSError as e:
            log.debug("Cannot resolve %s: %s", directory, e)
            return
        if real in visited:
            # Symlink loop or a directory reachable twice
            return
        visited.add(real)

        try:
            entries = list(directory.iterdir())
        except OSError as e:
            log.debug("Cannot list %s: %s", directory, e)
            return

        for entry in entries:
            try:
                if entry.is_dir():
                    if depth + 1 > self._max_depth:
                        log.debug("Max depth reached at %s", entry)
                        continue
                    yield from self._walk(root, entry, depth + 1, visited)
                elif entry.is_file() and root.watches(entry):
                    yield entry, int(entry.stat().st_mtime)
            except OSError as e:
                log.debug("Skipping %s: %s", entry, e)
