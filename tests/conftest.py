"""Shared fixtures: real PNG/JPEG files and catalog groups written with Pillow."""

import json
import zlib
from pathlib import Path

import pytest
from PIL import Image

# IHDR data runs from byte 16 to 29; its CRC covers the type tag and data
_IHDR_CRC_SPAN = slice(12, 29)
_IHDR_CRC = slice(29, 33)
_INTERLACE_BYTE = 28


def set_png_interlace(path: Path, method: int) -> None:
    """Rewrite the IHDR interlace method byte and fix up the chunk CRC."""
    data = bytearray(path.read_bytes())
    data[_INTERLACE_BYTE] = method
    crc = zlib.crc32(bytes(data[_IHDR_CRC_SPAN])) & 0xFFFFFFFF
    data[_IHDR_CRC] = crc.to_bytes(4, 'big')
    path.write_bytes(bytes(data))


def write_image(
    path: Path,
    size: tuple[int, int] = (64, 64),
    mode: str = 'RGB',
    interlaced: bool = False,
    **save_kwargs,
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color=0).save(path, **save_kwargs)
    if interlaced:
        set_png_interlace(path, 1)
    return path


def write_catalog_group(
    catalog: Path,
    name: str,
    variants: dict[str, tuple[int, tuple[int, int]]],
    manifest: object = None,
) -> Path:
    """Write <catalog>/<name>.imageset with one PNG per variant and a Contents.json.

    variants maps filename -> (scale, size). Pass manifest to write a custom
    Contents.json body instead.
    """
    group = catalog / f'{name}.imageset'
    group.mkdir(parents=True, exist_ok=True)
    for filename, (_scale, size) in variants.items():
        write_image(group / filename, size=size)
    if manifest is None:
        manifest = {
            'images': [
                {'filename': filename, 'idiom': 'universal', 'scale': f'{scale}x'}
                for filename, (scale, _size) in variants.items()
            ],
            'info': {'author': 'xcode', 'version': 1},
        }
    body = manifest if isinstance(manifest, str) else json.dumps(manifest)
    (group / 'Contents.json').write_text(body)
    return group


@pytest.fixture
def image_file():
    return write_image


@pytest.fixture
def catalog_group():
    return write_catalog_group
