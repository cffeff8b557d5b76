"""
Source discovery helpers for the command line interface.
"""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .config import AutoPropsConfig
from .transform import should_transform


def gitignore_rules(directory: Path) -> List[Tuple[str, Path]]:
    """(pattern, base directory) pairs from every .gitignore at or above ``directory``.

    Negated patterns are not supported and are skipped.
    """
    rules: List[Tuple[str, Path]] = []
    for base in (directory, *directory.parents):
        gitignore = base / ".gitignore"
        if not gitignore.is_file():
            continue
        for raw in gitignore.read_text(encoding="utf-8").splitlines():
            pattern = raw.strip()
            if pattern and pattern[0] not in "#!":
                rules.append((pattern, base))
    return rules


def match_ignore_pattern(file_path: Path, pattern: str, base_dir: Path) -> bool:
    """
    Match a file against a gitignore-style pattern anchored at ``base_dir``.

    Simple names ('node_modules', '*.gen.ts') match any path segment; patterns
    with a slash match the path relative to ``base_dir``; a trailing '/' limits
    the pattern to directories, a leading '/' anchors it at ``base_dir``.
    """
    pattern = pattern.strip().replace("\\", "/")
    if not pattern:
        return False
    try:
        relative = file_path.relative_to(base_dir).as_posix()
    except ValueError:
        return False

    directory_only = pattern.endswith("/")
    anchored = pattern.startswith("/")
    pattern = pattern.strip("/")
    parts = relative.split("/")
    candidates = parts[:-1] if directory_only else parts

    if "/" not in pattern and not anchored:
        return any(fnmatch.fnmatch(part, pattern) for part in candidates)

    prefixes = ["/".join(parts[:i]) for i in range(1, len(parts) + 1)]
    if directory_only:
        prefixes = prefixes[:-1]
    return any(fnmatch.fnmatch(prefix, pattern) for prefix in prefixes)


def discover_sources(paths: Iterable[str], config: Optional[AutoPropsConfig] = None) -> List[Path]:
    """Expand files and directories into the list of modules to transform."""
    config = config or AutoPropsConfig()
    found: List[Path] = []
    for raw in paths:
        path = Path(raw).resolve()
        if path.is_file():
            if should_transform(path.as_posix(), config):
                found.append(path)
            else:
                logging.info(f"Skipping {path}: not a TypeScript module")
            continue
        if not path.is_dir():
            logging.warning(f"Path does not exist: {raw}")
            continue

        ignore_rules = [(pattern, path) for pattern in config.ignored_patterns]
        ignore_rules.extend(gitignore_rules(path))
        candidates = sorted(p for p in path.rglob("*") if p.is_file() and should_transform(p.as_posix(), config))
        kept = [
            candidate for candidate in candidates
            if not any(match_ignore_pattern(candidate, pattern, base) for pattern, base in ignore_rules)
        ]
        logging.info(f"Found {len(kept)} TypeScript modules under {path} (after ignore rules).")
        found.extend(kept)
    return found
