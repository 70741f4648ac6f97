"""Asset inventory: standalone images and catalog-grouped variants with metadata.

Standalone images take their scale from an @2x/@3x filename suffix (default 1).
Catalog variants take it from the group's Contents.json manifest:

    {"images": [{"filename": "icon@2x.png", "idiom": "universal", "scale": "2x"}]}

A group whose manifest is missing or unparsable is skipped; a file without a
well-formed manifest record is dropped. Neither aborts the scan.

Dimensions and colour profile come from Pillow (PNG/JPEG only). The PNG
interlace flag is read straight from the IHDR header.
"""

from __future__ import annotations

import io
import json
import logging
import os
import re

from PIL import Image, ImageCms, UnidentifiedImageError

from asset_checker.core.types import Asset, AssetKind

logger = logging.getLogger('asset_checker.inventory')

_FORMATS = {
    'png': 'png',
    'jpg': 'jpeg',
    'jpeg': 'jpeg',
    'pdf': 'pdf',
    'svg': 'svg',
}
_KINDS = {
    'png': AssetKind.PNG,
    'jpeg': AssetKind.JPEG,
    'pdf': AssetKind.PDF,
    'svg': AssetKind.SVG,
}

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
# signature (8) + IHDR length (4) + b'IHDR' (4) + width (4) + height (4)
# + bit depth, colour type, compression, filter (1 each) -> interlace method
_IHDR_TAG = slice(12, 16)
_INTERLACE_OFFSET = 28

_MANIFEST = 'Contents.json'
_SCALE_RE = re.compile(r'^([123])x$')

# Pillow mode -> colour model name, used when no ICC profile is embedded
_COLOR_MODELS = {
    '1': 'Gray',
    'L': 'Gray',
    'LA': 'Gray',
    'I': 'Gray',
    'I;16': 'Gray',
    'F': 'Gray',
    'P': 'RGB',
    'PA': 'RGB',
    'RGB': 'RGB',
    'RGBA': 'RGB',
    'RGBX': 'RGB',
    'YCbCr': 'RGB',
    'CMYK': 'CMYK',
    'LAB': 'Lab',
}


def file_format(filename: str) -> str | None:
    _, ext = os.path.splitext(filename)
    return _FORMATS.get(ext[1:].lower())


def scale_from_filename(filename: str) -> int:
    if '@3x' in filename:
        return 3
    if '@2x' in filename:
        return 2
    return 1


def read_png_interlace(path: str) -> bool | None:
    """Interlace flag from the PNG IHDR chunk. None when the header is not a readable PNG."""
    try:
        with open(path, 'rb') as f:
            header = f.read(_INTERLACE_OFFSET + 1)
    except OSError:
        return None
    if len(header) <= _INTERLACE_OFFSET or not header.startswith(PNG_SIGNATURE):
        return None
    if header[_IHDR_TAG] != b'IHDR':
        return None
    method = header[_INTERLACE_OFFSET]
    if method == 0:
        return False
    if method == 1:
        return True
    return None


def _profile_description(icc: bytes) -> str | None:
    try:
        profile = ImageCms.ImageCmsProfile(io.BytesIO(icc))
        description = ImageCms.getProfileDescription(profile)
    except (ImageCms.PyCMSError, OSError, ValueError):
        return None
    description = (description or '').strip()
    return description or None


def read_raster_metadata(path: str) -> tuple[tuple[int, int] | None, str | None]:
    """(dimensions, colour profile) via Pillow. Both None for an unreadable container."""
    try:
        with Image.open(path) as img:
            dimensions = (int(img.width), int(img.height))
            info = dict(img.info)
            mode = img.mode
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug('Cannot read image metadata from %s: %s', path, exc)
        return None, None

    profile = None
    icc = info.get('icc_profile')
    if icc:
        profile = _profile_description(icc)
    if profile is None and 'srgb' in info:
        profile = 'sRGB'
    if profile is None:
        profile = _COLOR_MODELS.get(mode)
    return dimensions, profile


def _file_size(path: str) -> int:
    try:
        return os.path.getsize(path)
    except OSError:
        return 0


def _build_asset(
    root: str,
    rel_path: str,
    fmt: str,
    name: str,
    kind: AssetKind,
    scale: int | None,
    catalog_group: str | None = None,
) -> Asset:
    full = os.path.join(root, rel_path)
    dimensions = profile = interlaced = None
    if fmt in ('png', 'jpeg'):
        dimensions, profile = read_raster_metadata(full)
    if fmt == 'png':
        interlaced = read_png_interlace(full)
    return Asset(
        name=name,
        path=rel_path,
        byte_size=_file_size(full),
        kind=kind,
        file_format=fmt,
        scale=scale,
        dimensions=dimensions,
        is_interlaced=interlaced,
        color_profile=profile,
        catalog_group=catalog_group,
    )


def inventory_standalone(root: str, rel_path: str) -> list[Asset]:
    """One standalone image file -> [Asset], or [] if it is not an image we track."""
    filename = rel_path.rsplit('/', 1)[-1]
    fmt = file_format(filename)
    if fmt is None:
        return []
    return [
        _build_asset(
            root,
            rel_path,
            fmt,
            name=os.path.splitext(filename)[0],
            kind=_KINDS[fmt],
            scale=scale_from_filename(filename),
        )
    ]


def _parse_scale(record: dict) -> int | None:
    raw = record.get('scale', '1x')
    if not isinstance(raw, str):
        return None
    m = _SCALE_RE.match(raw.strip())
    return int(m.group(1)) if m else None


def load_manifest(group_dir: str) -> dict[str, int] | None:
    """Map filename -> scale for the well-formed records of a group's manifest.

    None when the manifest is missing, unparsable, or lacks an "images" list.
    """
    manifest = os.path.join(group_dir, _MANIFEST)
    try:
        with open(manifest, encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug('Skipping catalog group %s: %s', group_dir, exc)
        return None
    images = data.get('images') if isinstance(data, dict) else None
    if not isinstance(images, list):
        logger.debug('Skipping catalog group %s: no "images" list', group_dir)
        return None

    scales: dict[str, int] = {}
    for record in images:
        if not isinstance(record, dict):
            continue
        filename = record.get('filename')
        if not isinstance(filename, str) or not filename:
            continue
        scale = _parse_scale(record)
        if scale is None:
            continue
        scales[filename] = scale
    return scales


def inventory_catalog_group(root: str, rel_group: str) -> list[Asset]:
    """All variants of one .imageset group, in filename order."""
    group_dir = os.path.join(root, rel_group)
    scales = load_manifest(group_dir)
    if scales is None:
        return []
    try:
        filenames = sorted(os.listdir(group_dir))
    except OSError as exc:
        logger.warning('Skipping catalog group %s: %s', rel_group, exc)
        return []

    name = rel_group.rsplit('/', 1)[-1][: -len('.imageset')]
    assets = []
    for filename in filenames:
        fmt = file_format(filename)
        if fmt is None or filename not in scales:
            continue
        assets.append(
            _build_asset(
                root,
                f'{rel_group}/{filename}',
                fmt,
                name=name,
                kind=AssetKind.CATALOG_VARIANT,
                scale=scales[filename],
                catalog_group=rel_group,
            )
        )
    return assets
