"""
File Discovery - Recursive file finding and binary classification

Enumerates the files of the three source roots (content, layouts, includes),
applies the include/exclude options to the content scan and decides which
files are text and which are binary.
"""

import fnmatch
import logging
import os
import posixpath
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Tuple

from sitesource.ingest.filesystem import FileSystem, normalize_separators
from sitesource.ingest.item import ItemRole
from sitesource.settings import DataSourceConfig, compile_regex_entry

logger = logging.getLogger(__name__)

ROLE_DIRECTORIES = {
    ItemRole.CONTENT: "content",
    ItemRole.LAYOUT: "layouts",
    ItemRole.INCLUDE: "includes",
}

SIDECAR_SUFFIX = ".meta"


@dataclass(frozen=True)
class DiscoveredFile:
    """A file found by the walker."""

    relative_path: str  # forward slashes, relative to the root it was found in
    path: str
    forced: bool = False  # listed individually in `include`


def split_extension(basename: str, text_extensions: FrozenSet[str]) -> Tuple[str, str]:
    """Split a basename into (filename, extension).

    Configured text extensions may be compound (``html.twig``); the longest one
    ending the name wins. Otherwise the part after the last dot is the
    extension. Names without a dot, or whose only dot is the leading one, have
    no extension.

    Args:
        basename: File name without directories
        text_extensions: Lower-cased extensions without leading dots

    Returns:
        Tuple of (filename_without_extension, extension)
    """
    lowered = basename.lower()
    matches = [
        ext
        for ext in text_extensions
        if lowered.endswith("." + ext) and len(basename) > len(ext) + 1
    ]
    if matches:
        ext = max(matches, key=len)
        return basename[: -(len(ext) + 1)], basename[-len(ext):]

    name, dot, ext = basename.rpartition(".")
    if not dot or not name:
        return basename, ""
    return name, ext


def is_binary(basename: str, text_extensions: FrozenSet[str]) -> bool:
    """A file is binary when its extension is not a configured text extension."""
    _, ext = split_extension(basename, text_extensions)
    return ext.lower() not in text_extensions


def is_hidden(relative_path: str) -> bool:
    return any(part.startswith(".") for part in relative_path.split("/"))


def _normalize_entry(entry: str) -> str:
    entry = normalize_separators(entry).strip()
    while entry.startswith("./"):
        entry = entry[2:]
    return entry.rstrip("/")


def is_excluded(relative_path: str, exclude: Iterable[str]) -> bool:
    """Check a relative path against the exclude entries.

    A `/pattern/flags` entry is searched for as a regular expression. Any other
    entry matches every path containing it (so `drafts` drops
    `posts/drafts/x.md` too) or any path matching it as a glob pattern.
    """
    for entry in exclude:
        regex = compile_regex_entry(entry)
        if regex is not None:
            if regex.search(relative_path):
                return True
            continue

        entry = _normalize_entry(entry)
        if not entry:
            continue
        if entry in relative_path:
            return True
        if fnmatch.fnmatchcase(relative_path, entry):
            return True
    return False


def find_files(
    fs: FileSystem,
    root: str,
    skip_sidecars: bool = False,
    exclude: Iterable[str] = (),
    ignore_dot_files: bool = False,
) -> List[DiscoveredFile]:
    """Recursively find the files under a root.

    Args:
        fs: Filesystem to walk
        root: Directory to walk
        skip_sidecars: Leave out ``*.meta`` metadata files
        exclude: Exclude entries matched against the relative path
        ignore_dot_files: Leave out dot files and anything in dot directories

    Returns:
        Discovered files sorted by relative path
    """
    exclude = list(exclude)
    files = []

    for relative_path in fs.walk_files(root):
        if skip_sidecars and relative_path.endswith(SIDECAR_SUFFIX):
            continue
        if ignore_dot_files and is_hidden(relative_path):
            logger.debug(f"Skipping dot file: {relative_path}")
            continue
        if exclude and is_excluded(relative_path, exclude):
            logger.debug(f"Skipping excluded file: {relative_path}")
            continue

        files.append(
            DiscoveredFile(
                relative_path=relative_path,
                path=os.path.join(root, *relative_path.split("/")),
            )
        )

    files.sort(key=lambda f: f.relative_path)
    return files


def role_root(config: DataSourceConfig, role: ItemRole) -> str:
    return os.path.join(config.source_root, ROLE_DIRECTORIES[role])


def find_content_files(
    fs: FileSystem, config: DataSourceConfig
) -> List[DiscoveredFile]:
    """Find the content files, honouring the include and exclude options.

    Relative include entries are resolved against the content root. A
    directory entry is walked like the content root itself; a file entry is
    added as-is under its basename, bypassing the extension, dot-file and
    exclude filters. Entries that do not exist are skipped.

    Raises:
        FileAccessError: If the content root does not exist
    """
    content_root = role_root(config, ItemRole.CONTENT)
    walk_options = dict(
        skip_sidecars=True,
        exclude=config.exclude,
        ignore_dot_files=config.ignore_dot_files,
    )

    logger.info(f"Searching for content files in: {content_root}")
    files = find_files(fs, content_root, **walk_options)

    for entry in config.include:
        path = entry if os.path.isabs(entry) else os.path.join(content_root, entry)

        if fs.is_dir(path):
            logger.debug(f"Including directory: {path}")
            files.extend(find_files(fs, path, **walk_options))
        elif fs.is_file(path):
            logger.debug(f"Including file: {path}")
            files.append(
                DiscoveredFile(
                    relative_path=posixpath.basename(normalize_separators(path)),
                    path=path,
                    forced=True,
                )
            )
        else:
            logger.warning(f"Include entry is neither a file nor a directory: {entry}")

    logger.info(f"Found {len(files)} content files")
    return files


def find_role_files(
    fs: FileSystem, config: DataSourceConfig, role: ItemRole
) -> List[DiscoveredFile]:
    """Find layout or include files. A missing directory yields no files."""
    root = role_root(config, role)

    if not fs.is_dir(root):
        logger.debug(f"No {ROLE_DIRECTORIES[role]} directory at {root}")
        return []

    files = find_files(fs, root, ignore_dot_files=config.ignore_dot_files)
    logger.info(f"Found {len(files)} {ROLE_DIRECTORIES[role]} files")
    return files
