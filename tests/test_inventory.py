"""Tests for asset_checker.core.inventory: metadata and catalog manifests."""

import io
from pathlib import Path

from asset_checker.core.inventory import (
    file_format,
    inventory_catalog_group,
    inventory_standalone,
    load_manifest,
    read_png_interlace,
    read_raster_metadata,
    scale_from_filename,
)
from asset_checker.core.types import AssetKind
from PIL import ImageCms

from conftest import set_png_interlace


class TestFilenameHelpers:
    def test_file_format(self) -> None:
        assert file_format('a.PNG') == 'png'
        assert file_format('a.jpg') == 'jpeg'
        assert file_format('a.jpeg') == 'jpeg'
        assert file_format('a.svg') == 'svg'
        assert file_format('a.gif') is None

    def test_scale_from_filename(self) -> None:
        assert scale_from_filename('icon@3x.png') == 3
        assert scale_from_filename('icon@2x.png') == 2
        assert scale_from_filename('icon.png') == 1


class TestPngInterlace:
    def test_not_interlaced(self, tmp_path: Path, image_file) -> None:
        path = image_file(tmp_path / 'a.png')
        assert read_png_interlace(str(path)) is False

    def test_interlaced(self, tmp_path: Path, image_file) -> None:
        path = image_file(tmp_path / 'a.png', interlaced=True)
        assert read_png_interlace(str(path)) is True

    def test_unknown_method(self, tmp_path: Path, image_file) -> None:
        path = image_file(tmp_path / 'a.png')
        set_png_interlace(path, 7)
        assert read_png_interlace(str(path)) is None

    def test_not_a_png(self, tmp_path: Path) -> None:
        path = tmp_path / 'a.png'
        path.write_bytes(b'GIF89a' + b'\x00' * 40)
        assert read_png_interlace(str(path)) is None

    def test_truncated(self, tmp_path: Path) -> None:
        path = tmp_path / 'a.png'
        path.write_bytes(b'\x89PNG\r\n\x1a\n\x00\x00')
        assert read_png_interlace(str(path)) is None


class TestRasterMetadata:
    def test_dimensions_and_colour_model(self, tmp_path: Path, image_file) -> None:
        path = image_file(tmp_path / 'a.png', size=(30, 20))
        assert read_raster_metadata(str(path)) == ((30, 20), 'RGB')

    def test_grayscale(self, tmp_path: Path, image_file) -> None:
        path = image_file(tmp_path / 'a.png', mode='L')
        assert read_raster_metadata(str(path))[1] == 'Gray'

    def test_embedded_icc_profile(self, tmp_path: Path, image_file) -> None:
        profile = ImageCms.ImageCmsProfile(ImageCms.createProfile('sRGB'))
        path = image_file(tmp_path / 'a.png', icc_profile=profile.tobytes())
        _dims, description = read_raster_metadata(str(path))
        expected = ImageCms.getProfileDescription(ImageCms.ImageCmsProfile(io.BytesIO(profile.tobytes()))).strip()
        assert description == expected

    def test_jpeg(self, tmp_path: Path, image_file) -> None:
        path = image_file(tmp_path / 'photo.jpg', size=(10, 12))
        assert read_raster_metadata(str(path)) == ((10, 12), 'RGB')

    def test_unreadable(self, tmp_path: Path) -> None:
        path = tmp_path / 'broken.png'
        path.write_bytes(b'not an image')
        assert read_raster_metadata(str(path)) == (None, None)


class TestStandalone:
    def test_png(self, tmp_path: Path, image_file) -> None:
        image_file(tmp_path / 'Images' / 'logo@2x.png', size=(88, 88), interlaced=True)
        [asset] = inventory_standalone(str(tmp_path), 'Images/logo@2x.png')
        assert asset.name == 'logo@2x'
        assert asset.path == 'Images/logo@2x.png'
        assert asset.kind is AssetKind.PNG
        assert asset.scale == 2
        assert asset.dimensions == (88, 88)
        assert asset.is_interlaced is True
        assert asset.byte_size == (tmp_path / 'Images' / 'logo@2x.png').stat().st_size

    def test_vector_has_no_metadata(self, tmp_path: Path) -> None:
        (tmp_path / 'shape.svg').write_text('<svg xmlns="http://www.w3.org/2000/svg"/>')
        [asset] = inventory_standalone(str(tmp_path), 'shape.svg')
        assert asset.kind is AssetKind.SVG
        assert asset.dimensions is None
        assert asset.color_profile is None
        assert asset.is_interlaced is None

    def test_unreadable_png_still_inventoried(self, tmp_path: Path) -> None:
        (tmp_path / 'broken.png').write_bytes(b'junk')
        [asset] = inventory_standalone(str(tmp_path), 'broken.png')
        assert asset.byte_size == 4
        assert asset.dimensions is None
        assert asset.is_interlaced is None

    def test_untracked_extension(self, tmp_path: Path) -> None:
        (tmp_path / 'anim.gif').write_bytes(b'GIF89a')
        assert inventory_standalone(str(tmp_path), 'anim.gif') == []


class TestCatalogGroup:
    def test_variants(self, tmp_path: Path, catalog_group) -> None:
        catalog_group(
            tmp_path / 'Assets.xcassets',
            'icon',
            {'icon.png': (1, (44, 44)), 'icon@2x.png': (2, (88, 88)), 'icon@3x.png': (3, (132, 132))},
        )
        assets = inventory_catalog_group(str(tmp_path), 'Assets.xcassets/icon.imageset')
        assert [a.scale for a in assets] == [1, 2, 3]
        assert {a.name for a in assets} == {'icon'}
        assert all(a.kind is AssetKind.CATALOG_VARIANT for a in assets)
        assert all(a.catalog_group == 'Assets.xcassets/icon.imageset' for a in assets)

    def test_file_without_record_dropped(self, tmp_path: Path, catalog_group, image_file) -> None:
        group = catalog_group(tmp_path / 'Assets.xcassets', 'icon', {'icon@2x.png': (2, (88, 88))})
        image_file(group / 'stray.png')
        assets = inventory_catalog_group(str(tmp_path), 'Assets.xcassets/icon.imageset')
        assert [a.path for a in assets] == ['Assets.xcassets/icon.imageset/icon@2x.png']

    def test_missing_scale_means_1x(self, tmp_path: Path, catalog_group) -> None:
        catalog_group(
            tmp_path / 'Assets.xcassets',
            'logo',
            {'logo.pdf': (1, (1, 1))},
            manifest={'images': [{'filename': 'logo.pdf', 'idiom': 'universal'}]},
        )
        assert load_manifest(str(tmp_path / 'Assets.xcassets' / 'logo.imageset')) == {'logo.pdf': 1}

    def test_bad_scale_record_skipped(self, tmp_path: Path, catalog_group) -> None:
        catalog_group(
            tmp_path / 'Assets.xcassets',
            'icon',
            {'icon.png': (1, (44, 44)), 'icon@4x.png': (4, (176, 176))},
        )
        assets = inventory_catalog_group(str(tmp_path), 'Assets.xcassets/icon.imageset')
        assert [a.scale for a in assets] == [1]

    def test_malformed_manifest_skips_group(self, tmp_path: Path, catalog_group) -> None:
        catalog_group(tmp_path / 'Assets.xcassets', 'icon', {'icon.png': (1, (44, 44))}, manifest='{not json')
        assert inventory_catalog_group(str(tmp_path), 'Assets.xcassets/icon.imageset') == []

    def test_manifest_without_images(self, tmp_path: Path, catalog_group) -> None:
        catalog_group(tmp_path / 'Assets.xcassets', 'icon', {'icon.png': (1, (44, 44))}, manifest={'info': {}})
        assert inventory_catalog_group(str(tmp_path), 'Assets.xcassets/icon.imageset') == []
