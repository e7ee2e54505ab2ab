"""
Candidate cache roots for each supported package manager.

Every resolver is a pure function of the home directory and an environment
mapping, so the tables can be tested without touching the real environment.
A resolver returns no candidates when the home directory is unknown.
"""

import logging
from pathlib import Path
from typing import Callable, List, Mapping, Optional

logger = logging.getLogger(__name__)

PathResolver = Callable[[Optional[Path], Mapping[str, str]], List[Path]]

NPM_SYSTEM_ROOTS = [
    Path("/opt/node22/lib/node_modules"),
    Path("/usr/local/lib/node_modules"),
    Path("/usr/lib/node_modules"),
]


def get_home_directory() -> Optional[Path]:
    """
    Get the current user's home directory.

    Returns:
        Home directory, or None if it cannot be determined
    """
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        logger.debug(f"Home directory unavailable: {e}")
        return None


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Get an environment value, treating empty strings as unset."""
    value = environ.get(name)
    return value or None


def npm_paths(home: Optional[Path], environ: Mapping[str, str]) -> List[Path]:
    if home is None:
        return []
    return [home / ".npm"] + list(NPM_SYSTEM_ROOTS)


def pnpm_paths(home: Optional[Path], environ: Mapping[str, str]) -> List[Path]:
    """PNPM_HOME adds its store directory to the defaults."""
    if home is None:
        return []
    paths = [
        home / ".pnpm-store",
        home / ".local" / "share" / "pnpm" / "store",
        home / "Library" / "pnpm" / "store",
    ]
    pnpm_home = _env(environ, "PNPM_HOME")
    if pnpm_home:
        paths.append(Path(pnpm_home) / "store")
    return paths


def yarn_paths(home: Optional[Path], environ: Mapping[str, str]) -> List[Path]:
    """YARN_CACHE_FOLDER is added to the defaults as-is."""
    if home is None:
        return []
    paths = [
        home / ".yarn-cache",
        home / ".cache" / "yarn",
        home / "Library" / "Caches" / "Yarn",
    ]
    yarn_cache = _env(environ, "YARN_CACHE_FOLDER")
    if yarn_cache:
        paths.append(Path(yarn_cache))
    return paths


def bun_paths(home: Optional[Path], environ: Mapping[str, str]) -> List[Path]:
    if home is None:
        return []
    return [
        home / ".bun" / "install" / "cache",
        home / ".bun" / "install" / "global",
        home / ".cache" / ".bun" / "install" / "cache",
    ]


def deno_paths(home: Optional[Path], environ: Mapping[str, str]) -> List[Path]:
    """DENO_DIR replaces the default ~/.cache/deno rather than adding to it."""
    if home is None:
        return []
    deno_dir = _env(environ, "DENO_DIR")
    base = Path(deno_dir) if deno_dir else home / ".cache" / "deno"
    return [
        base / "npm",
        base / "deps" / "https",
    ]
