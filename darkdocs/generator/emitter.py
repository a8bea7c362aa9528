"""Write rendered pages and static assets beneath an output root.

In dry-run mode the emitter computes every destination and logs what it
would have done, but never touches the filesystem. Each intended action is
also kept in :attr:`PageEmitter.planned` so callers and tests can inspect it.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    import collections.abc as cabc

log = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class PlannedWrite:
    """An action the emitter performed, or would have performed."""

    action: str
    path: Path
    size: int = 0


class PageEmitter:
    """Persist rendered pages under ``output_dir``."""

    def __init__(self, output_dir: Path, *, dry_run: bool = False) -> None:
        self.output_dir = output_dir
        self.dry_run = dry_run
        self.planned: list[PlannedWrite] = []
        self._known_dirs: set[Path] = set()

    def destination(self, relative: str) -> Path:
        """Return the absolute destination for a POSIX path under the root."""
        return self.output_dir / Path(*relative.split("/"))

    def emit(self, relative: str, content: str) -> Path:
        """Write ``content`` to ``relative`` below the output root.

        Missing ancestor directories are created first. Returns the
        destination path whether or not anything was written.
        """
        outfile = self.destination(relative)
        self._ensure_dir(outfile.parent)
        data = content.encode("utf-8")
        self.planned.append(PlannedWrite("write", outfile, len(data)))
        if self.dry_run:
            log.info("would have written %d bytes to %s", len(data), outfile)
            return outfile
        log.debug("writing %s", outfile)
        outfile.write_bytes(data)
        return outfile

    def copy_static(
        self, source_dir: Path, names: cabc.Iterable[str] | None = None
    ) -> list[Path]:
        """Copy static assets from ``source_dir`` verbatim into the output root.

        Parameters
        ----------
        source_dir : Path
            Directory holding stylesheets, scripts, and images.
        names : Iterable[str], optional
            Entries to copy; defaults to everything in ``source_dir``.
            Names that do not exist are skipped.
        """
        if names is None:
            entries = sorted(source_dir.iterdir()) if source_dir.is_dir() else []
        else:
            entries = [source_dir / name for name in names]

        copied: list[Path] = []
        for entry in entries:
            if not entry.exists():
                log.debug("static asset %s missing; skipped", entry)
                continue
            target = self.output_dir / entry.name
            self._ensure_dir(target.parent)
            self.planned.append(PlannedWrite("copy", target))
            if self.dry_run:
                log.info("would have copied %s to %s", entry, target)
            elif entry.is_dir():
                shutil.copytree(entry, target, dirs_exist_ok=True)
            else:
                shutil.copy2(entry, target)
            copied.append(target)
        return copied

    def _ensure_dir(self, directory: Path) -> None:
        if directory in self._known_dirs:
            return
        self._known_dirs.add(directory)
        if self.dry_run:
            if not directory.exists():
                self.planned.append(PlannedWrite("mkdir", directory))
                log.info("would have created %s", directory)
            return
        directory.mkdir(parents=True, exist_ok=True)


__all__ = ["PageEmitter", "PlannedWrite"]
