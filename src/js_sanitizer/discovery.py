"""Selection of test source files under the requested paths."""

from __future__ import annotations

import os
from dataclasses import dataclass
from os.path import commonpath
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pathspec import PathSpec

from .constants import CONFIG_EXCLUDE, CONFIG_EXTENSIONS, CONFIG_INCLUDE
from .errors import ERROR_MSG_EMPTY_PATHS, ERROR_MSG_NO_COMMON_ANCESTOR, PathNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence


def find_common_ancestor(paths: Sequence[Path]) -> Path:
    """Return the deepest common directory of ``paths``."""
    if not paths:
        raise PathNotFoundError(ERROR_MSG_EMPTY_PATHS)
    resolved = [p.resolve() for p in paths]
    try:
        root = Path(commonpath([str(p) for p in resolved]))
    except ValueError as e:
        raise PathNotFoundError(ERROR_MSG_NO_COMMON_ANCESTOR) from e
    return root.parent if root.is_file() else root


@dataclass(frozen=True, slots=True)
class FileSelector:
    """Include/exclude matching relative to a base directory."""

    base: Path
    include: PathSpec
    exclude: PathSpec
    extensions: frozenset[str]

    @classmethod
    def from_config(cls, base: Path, cfg: dict[str, Any]) -> FileSelector:
        return cls(
            base=base,
            include=PathSpec.from_lines("gitwildmatch", cfg.get(CONFIG_INCLUDE, [])),
            exclude=PathSpec.from_lines("gitwildmatch", cfg.get(CONFIG_EXCLUDE, [])),
            extensions=frozenset(ext.lower() for ext in cfg.get(CONFIG_EXTENSIONS, [])),
        )

    def _rel(self, path: Path, *, is_dir: bool = False) -> str:
        rel = path.relative_to(self.base).as_posix()
        return f"{rel}/" if is_dir else rel

    def excludes_dir(self, path: Path) -> bool:
        return self.exclude.match_file(self._rel(path, is_dir=True))

    def selects(self, path: Path) -> bool:
        if path.suffix.lower() not in self.extensions:
            return False
        rel = self._rel(path)
        return self.include.match_file(rel) and not self.exclude.match_file(rel)

    def walk(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            dirnames[:] = sorted(d for d in dirnames if not self.excludes_dir(current / d))
            for name in sorted(filenames):
                candidate = current / name
                if self.selects(candidate):
                    yield candidate


def discover_files(paths: Iterable[Path], cfg: dict[str, Any]) -> tuple[Path, list[Path]]:
    """Return the common base directory and the sorted test files to gate.

    Files named explicitly are kept when their suffix is supported, whether or
    not they match the include patterns.
    """
    requested = list(paths)
    missing = [p for p in requested if not p.exists()]
    if missing:
        missing_str = ", ".join(sorted(str(p) for p in missing))
        msg = f"paths do not exist: {missing_str}"
        raise PathNotFoundError(msg)

    base = find_common_ancestor(requested)
    selector = FileSelector.from_config(base, cfg)
    found: set[Path] = set()
    for path in requested:
        resolved = path.resolve()
        if resolved.is_file():
            if resolved.suffix.lower() in selector.extensions:
                found.add(resolved)
            continue
        found.update(selector.walk(resolved))
    return base, sorted(found)


__all__ = ["FileSelector", "discover_files", "find_common_ancestor"]
