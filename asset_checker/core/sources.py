"""Walk a project tree once and classify what the scanners need.

Produces an immutable SourceTree of root-relative POSIX paths:
  - text sources by category (swift, objc, interface-builder, plist, strings)
    plus fallback-only text files searched by the raw-substring pass,
  - standalone image files (anything outside an .xcassets catalog),
  - catalog groups (.imageset directories inside an .xcassets catalog),
  - names of images shipped inside resource bundles (*.bundle).

Hidden directories are skipped. Nothing under an .xcassets catalog is ever a
text source: its Contents.json manifests name every image they hold.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from asset_checker.core.types import SkippedFile

logger = logging.getLogger('asset_checker.sources')

CATEGORY_EXTENSIONS: dict[str, tuple[str, ...]] = {
    'swift': ('swift',),
    'objc': ('m', 'mm', 'h'),
    'interface-builder': ('storyboard', 'xib'),
    'plist': ('plist',),
    'strings': ('strings',),
}

ASSET_EXTENSIONS = ('png', 'jpg', 'jpeg', 'pdf', 'svg')
FALLBACK = 'fallback'


@dataclass(frozen=True)
class SourceFile:
    path: str
    category: str  # a CATEGORY_EXTENSIONS key, or FALLBACK
    text: str


@dataclass(frozen=True)
class SourceTree:
    root: str
    text_paths: tuple[tuple[str, str], ...]  # (path, category)
    image_paths: tuple[str, ...]
    catalog_groups: tuple[str, ...]
    bundle_images: tuple[str, ...]


def category_for(filename: str, fallback_extensions: tuple[str, ...] = ()) -> str | None:
    """Return the source category for a filename, FALLBACK, or None if not text we read."""
    ext = _extension(filename)
    for category, extensions in CATEGORY_EXTENSIONS.items():
        if ext in extensions:
            return category
    if ext in fallback_extensions:
        return FALLBACK
    return None


def _extension(filename: str) -> str:
    _, ext = os.path.splitext(filename)
    return ext[1:].lower()


def is_asset_file(filename: str) -> bool:
    return _extension(filename) in ASSET_EXTENSIONS


def _is_hidden(name: str) -> bool:
    return name.startswith('.')


def scan_tree(root: str, fallback_extensions: tuple[str, ...] = ()) -> SourceTree:
    """Walk root and classify every file. Raises NotADirectoryError for a bad root."""
    if not os.path.isdir(root):
        raise NotADirectoryError(f'not a directory: {root}')

    text_paths: list[tuple[str, str]] = []
    image_paths: list[str] = []
    catalog_groups: list[str] = []
    bundle_images: list[str] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not _is_hidden(d))
        rel_dir = PurePosixPath(Path(os.path.relpath(dirpath, root)).as_posix())
        parts = rel_dir.parts if str(rel_dir) != '.' else ()

        in_catalog = any(p.endswith('.xcassets') for p in parts)
        in_bundle = any(p.endswith('.bundle') for p in parts)

        if in_catalog:
            if parts[-1].endswith('.imageset'):
                catalog_groups.append(str(rel_dir))
            continue

        for filename in sorted(filenames):
            rel_path = str(rel_dir / filename) if parts else filename
            if is_asset_file(filename):
                image_paths.append(rel_path)
                if in_bundle:
                    bundle_images.append(os.path.splitext(filename)[0])
                continue
            category = category_for(filename, fallback_extensions)
            if category is not None:
                text_paths.append((rel_path, category))

    logger.debug(
        'scanned %s: %d text files, %d images, %d catalog groups',
        root,
        len(text_paths),
        len(image_paths),
        len(catalog_groups),
    )
    return SourceTree(
        root=root,
        text_paths=tuple(text_paths),
        image_paths=tuple(image_paths),
        catalog_groups=tuple(catalog_groups),
        bundle_images=tuple(bundle_images),
    )


def read_source(root: str, path: str, category: str) -> SourceFile | SkippedFile:
    """Read one text file. Unreadable files come back as SkippedFile, never raise."""
    full = os.path.join(root, path)
    try:
        with open(full, encoding='utf-8') as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        logger.warning('Skipping %s due to encoding issue: %s', path, exc.reason)
        return SkippedFile(path=path, reason=f'encoding: {exc.reason}')
    except OSError as exc:
        logger.warning('Skipping %s: %s', path, exc.strerror or exc)
        return SkippedFile(path=path, reason=str(exc.strerror or exc))
    return SourceFile(path=path, category=category, text=text)
