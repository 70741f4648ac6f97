"""Classify every asset as used, unused, or exempt.

The used-name set is the union of normalised literal references, expanded
template candidates and the names of images shipped in resource bundles.
An asset is used when any of its name variants is in that set. Otherwise a
raw substring search of its name over every scanned text file gets the last
word: a hit means used. Only an asset that survives both is reported unused.

Three kinds of asset never count as unused, whatever the references say:
test/snapshot reference images, watch companion images, and system-managed
icon and launch-image sets. Build tooling consumes them, not source code.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor

from asset_checker.core.bindings import BindingTable
from asset_checker.core.config import CheckerConfig
from asset_checker.core.interpolation import resolve_all
from asset_checker.core.references import reference_names
from asset_checker.core.sources import SourceFile
from asset_checker.core.types import Asset, DynamicReference, ReferenceOccurrence, TemplatePattern, UsageResult

logger = logging.getLogger('asset_checker.usage')

TEST_ASSET = 'test/snapshot reference image'
WATCH_ASSET = 'watch companion image'
SYSTEM_ASSET = 'system-managed asset'

_TEST_PATH_MARKERS = ('referenceimages', 'tests/', 'test/', 'snapshot')
_TEST_NAME_MARKERS = ('test', 'snapshot')
_WATCH_MARKERS = ('watch extension', 'watchkit', 'complication', '.watchapp/', 'watch app')
_SYSTEM_MARKERS = (
    'appicon.appiconset',
    'appicon.solidimagestack',
    'launchimage.launchimage',
    '.solidimagestacklayer',
    'assets.car',
)


def exemption_reason(asset: Asset) -> str | None:
    """Why an asset can never be reported unused, or None."""
    path = asset.path.lower()
    name = asset.name.lower()
    if any(m in path for m in _TEST_PATH_MARKERS) or any(m in name for m in _TEST_NAME_MARKERS):
        return TEST_ASSET
    if any(m in path for m in _WATCH_MARKERS):
        return WATCH_ASSET
    if any(m in path for m in _SYSTEM_MARKERS) or ('appicon' in path and '.imageset' in path):
        return SYSTEM_ASSET
    return None


def name_variants(asset: Asset) -> set[str]:
    name = asset.name
    variants = {name, name.split('.', 1)[0]}
    base = name.replace('@2x', '').replace('@3x', '')
    variants |= {base, f'{base}@2x', f'{base}@3x'}
    if asset.catalog_group:
        group = asset.catalog_group.rsplit('/', 1)[-1]
        variants.add(group.rsplit('.', 1)[0])
    variants |= {v.lower() for v in list(variants)} | {name.upper()}
    return variants


def build_used_names(
    occurrences: Iterable[ReferenceOccurrence],
    templates: Iterable[TemplatePattern],
    table: BindingTable,
    bundle_images: Iterable[str],
    config: CheckerConfig,
) -> frozenset[str]:
    names = reference_names(occurrences, config.hd_suffixes)
    names |= resolve_all(templates, table, config)
    names |= set(bundle_images)
    return frozenset(names)


def fallback_referenced(name: str, sources: Sequence[SourceFile]) -> bool:
    """True if name occurs verbatim anywhere in any scanned text file."""
    return any(name in source.text for source in sources)


def build_usage(
    assets: Sequence[Asset],
    used_names: frozenset[str],
    sources: Sequence[SourceFile],
    dynamic_references: Sequence[DynamicReference] = (),
    executor: Executor | None = None,
) -> UsageResult:
    exempt: list[tuple[Asset, str]] = []
    unmatched: list[Asset] = []
    for asset in assets:
        reason = exemption_reason(asset)
        if reason is not None:
            exempt.append((asset, reason))
        elif name_variants(asset).isdisjoint(used_names):
            unmatched.append(asset)

    names = [asset.name for asset in unmatched]
    if executor is None:
        hits = [fallback_referenced(n, sources) for n in names]
    else:
        hits = list(executor.map(lambda n: fallback_referenced(n, sources), names))

    unused = []
    for asset, hit in zip(unmatched, hits):
        if hit:
            logger.debug('%s found by substring fallback', asset.path)
        else:
            unused.append(asset)

    logger.debug('%d assets: %d exempt, %d unused', len(assets), len(exempt), len(unused))
    return UsageResult(
        used_names=used_names,
        unused=tuple(unused),
        exempt=tuple(exempt),
        dynamic_references=tuple(dynamic_references),
    )
