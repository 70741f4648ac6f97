"""Tests for asset_checker.core.usage: variants, exemptions and classification."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from asset_checker.core.bindings import BindingTable
from asset_checker.core.config import CheckerConfig
from asset_checker.core.sources import SourceFile
from asset_checker.core.types import Asset, AssetKind, Binding, ReferenceOccurrence, TemplatePattern
from asset_checker.core.usage import (
    SYSTEM_ASSET,
    TEST_ASSET,
    WATCH_ASSET,
    build_usage,
    build_used_names,
    exemption_reason,
    fallback_referenced,
    name_variants,
)


def _asset(name: str, path: str | None = None, group: str | None = None) -> Asset:
    return Asset(
        name=name,
        path=path or f'Images/{name}.png',
        byte_size=100,
        kind=AssetKind.CATALOG_VARIANT if group else AssetKind.PNG,
        file_format='png',
        scale=1,
        catalog_group=group,
    )


class TestNameVariants:
    def test_scale_forms(self) -> None:
        variants = name_variants(_asset('logo@2x'))
        assert {'logo@2x', 'logo', 'logo@3x'} <= variants

    def test_dotted_name(self) -> None:
        assert 'hero' in name_variants(_asset('hero.large'))

    def test_case_folded(self) -> None:
        variants = name_variants(_asset('TabHome'))
        assert {'TabHome', 'tabhome', 'TABHOME'} <= variants

    def test_catalog_group_name(self) -> None:
        asset = _asset('Logo', path='A.xcassets/Logo.imageset/logo-1.png', group='A.xcassets/Logo.imageset')
        assert 'Logo' in name_variants(asset)


class TestExemptions:
    @pytest.mark.parametrize(
        ('path', 'name', 'reason'),
        [
            ('AppTests/ReferenceImages/home.png', 'home', TEST_ASSET),
            ('Sources/snapshots/cell.png', 'cell', TEST_ASSET),
            ('Images/test_pattern.png', 'test_pattern', TEST_ASSET),
            ('MyApp Watch Extension/face.png', 'face', WATCH_ASSET),
            ('Images/complication_round.png', 'complication_round', WATCH_ASSET),
            ('Assets.xcassets/AppIcon.appiconset/icon-60.png', 'icon-60', SYSTEM_ASSET),
            ('Assets.xcassets/LaunchImage.launchimage/default.png', 'default', SYSTEM_ASSET),
            ('Assets.xcassets/AppIcon-Dark.imageset/dark.png', 'AppIcon-Dark', SYSTEM_ASSET),
        ],
    )
    def test_reasons(self, path: str, name: str, reason: str) -> None:
        assert exemption_reason(_asset(name, path=path)) == reason

    def test_ordinary_asset(self) -> None:
        assert exemption_reason(_asset('banner')) is None


class TestUsedNames:
    def test_union_of_sources(self) -> None:
        names = build_used_names(
            [ReferenceOccurrence('logo.png', 'Home.swift', 1)],
            [TemplatePattern('bg_', 'mode', '')],
            BindingTable.fold([Binding('mode', ('Day',))]),
            ['sprite'],
            CheckerConfig(),
        )
        assert {'logo.png', 'logo', 'logo@2x', 'bg_Day', 'Images/Day', 'sprite'} <= names
        assert 'Images/bg_Day' not in names


class TestBuildUsage:
    def test_classification(self) -> None:
        assets = [_asset('used'), _asset('found_by_text'), _asset('orphan'), _asset('snapshot_home')]
        sources = [SourceFile('notes.md', 'fallback', 'see found_by_text for details')]
        result = build_usage(assets, frozenset({'used'}), sources)
        assert [a.name for a in result.unused] == ['orphan']
        assert [(a.name, reason) for a, reason in result.exempt] == [('snapshot_home', TEST_ASSET)]

    def test_exempt_even_if_unreferenced(self) -> None:
        asset = _asset('icon-60', path='Assets.xcassets/AppIcon.appiconset/icon-60.png')
        result = build_usage([asset], frozenset(), [])
        assert result.unused == ()

    def test_parallel_fallback_keeps_order(self) -> None:
        assets = [_asset(f'img_{i}') for i in range(20)]
        sources = [SourceFile('a.txt', 'fallback', 'img_3 img_7')]
        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = build_usage(assets, frozenset(), sources, executor=pool)
        serial = build_usage(assets, frozenset(), sources)
        assert parallel == serial
        assert [a.name for a in parallel.unused][:3] == ['img_0', 'img_1', 'img_2']

    def test_fallback_substring(self) -> None:
        sources = [SourceFile('a.swift', 'swift', 'let x = prefix + "hero"')]
        assert fallback_referenced('hero', sources)
        assert not fallback_referenced('villain', sources)
