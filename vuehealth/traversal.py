"""
File system traversal: walk directories and collect component and script files.

This module finds the files the rule engine parses: single-file components
(.vue) and plain scripts (.js, .ts and their module/JSX variants). Build
output, dependencies and tool caches are skipped.

Typical usage:
    from pathlib import Path
    from vuehealth.traversal import find_source_files

    # Components and scripts
    files = find_source_files(Path("./my_app"))

    # Components only
    components = find_source_files(Path("./my_app"), include_scripts=False)
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)

COMPONENT_SUFFIXES = frozenset({".vue"})
SCRIPT_SUFFIXES = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".mts", ".cts"})

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Build and distribution directories
    "dist",
    "build",
    "out",
    "public",
    "coverage",
    ".output",
    ".nuxt",
    ".next",
    ".vite",
    "__snapshots__",
    # Dependency and vendored code
    "node_modules",
    "vendor",
    "iconfont",
    # Version control
    ".git",
    ".svn",
    ".hg",
    # IDE and editor directories
    ".vscode",
    ".idea",
    # Cache directories
    ".cache",
    ".turbo",
}


def is_component_file(path: Path) -> bool:
    """
    Check if a file is a single-file component (.vue extension).

    Examples:
        >>> is_component_file(Path("App.vue"))
        True
        >>> is_component_file(Path("main.ts"))
        False
    """
    return path.suffix.lower() in COMPONENT_SUFFIXES


def is_script_file(path: Path) -> bool:
    """
    Check if a file is a JavaScript/TypeScript source. Minified bundles are not.

    Examples:
        >>> is_script_file(Path("main.ts"))
        True
        >>> is_script_file(Path("vendor.min.js"))
        False
    """
    if path.name.endswith((".min.js", ".min.mjs")):
        return False
    return path.suffix.lower() in SCRIPT_SUFFIXES


def is_source_file(path: Path, include_scripts: bool = True) -> bool:
    """Check if a file is a component, or (with include_scripts) a script."""
    if is_component_file(path):
        return True
    return include_scripts and is_script_file(path)


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """
    Check if a directory should be ignored during traversal.

    Only the directory name is compared (case-sensitive), and "dist-*"
    build variants are always skipped.
    """
    return dir_path.name in ignore_dirs or dir_path.name.startswith("dist-")


def find_source_files(
    root: Path,
    include_scripts: bool = True,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively find all component (and script) files in a directory tree.

    Args:
        root: Root directory to start traversal from.
        include_scripts: If True, also collect .js/.ts files; if False, only .vue files.
        ignore_dirs: Set of directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: If True, follow symbolic links during traversal.
        filter_fn: Optional additional filter; only files for which it returns True are kept.

    Returns:
        Sorted list of matching file paths.

    Raises:
        FileNotFoundError: If the root directory does not exist.
        NotADirectoryError: If root is not a directory.

    Notes:
        - Permission errors on subdirectories are logged but do not stop traversal.
        - The root path is resolved to an absolute path before traversal.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()

    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Root directory does not exist: {root}")

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Starting traversal from: %s", root)
    logger.debug(
        "Traversal config: include_scripts=%s, follow_symlinks=%s, ignore_dirs=%s",
        include_scripts,
        follow_symlinks,
        ignore_dirs,
    )

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue

                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)

                elif entry.is_file() and is_source_file(entry, include_scripts=include_scripts):
                    if filter_fn is not None and not filter_fn(entry):
                        logger.debug("Filtered out by custom filter: %s", entry)
                        continue
                    collected_files.append(entry)

        except PermissionError as e:
            logger.warning("Permission denied accessing directory %s: %s", current_dir, e)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)
    collected_files.sort()

    logger.info(
        "Traversal complete: found %d source file(s) in %s",
        len(collected_files),
        root,
    )
    return collected_files
