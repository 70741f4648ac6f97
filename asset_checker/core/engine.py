"""analyze(): scan a project tree and build the full AnalysisReport.

    scan_tree ──> read sources ──> per-file scan ──┐
             └──> inventory ───────────────────────┼──> usage
                                                   └──> compliance

Every per-file step is a pure function run on a ThreadPoolExecutor; results
are folded in sorted path order, so two runs over an unchanged tree give the
same report. The usage and compliance branches run concurrently once the
inventory is complete.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from asset_checker import registry
from asset_checker.core.bindings import BindingTable, collect_bindings
from asset_checker.core.config import CheckerConfig
from asset_checker.core.interpolation import detect_dynamic_references, detect_templates
from asset_checker.core.inventory import inventory_catalog_group, inventory_standalone
from asset_checker.core.patterns import iter_literals
from asset_checker.core.references import extract_references
from asset_checker.core.scoring import run_compliance
from asset_checker.core.sources import SourceFile, SourceTree, read_source, scan_tree
from asset_checker.core.types import (
    AnalysisReport,
    Asset,
    Binding,
    DynamicReference,
    ReferenceOccurrence,
    Rule,
    SkippedFile,
    TemplatePattern,
)
from asset_checker.core.usage import build_usage, build_used_names

logger = logging.getLogger('asset_checker.engine')


@dataclass(frozen=True)
class FileScan:
    """Everything the usage branch needs from one text file."""

    references: tuple[ReferenceOccurrence, ...]
    bindings: tuple[Binding, ...]
    templates: tuple[TemplatePattern, ...]
    dynamic_references: tuple[DynamicReference, ...]


def scan_source(source: SourceFile) -> FileScan:
    literals = tuple(iter_literals(source.text, source.category))
    return FileScan(
        references=extract_references(source, literals),
        bindings=collect_bindings(source),
        templates=detect_templates(source, literals),
        dynamic_references=detect_dynamic_references(source),
    )


def _inventory(tree: SourceTree, pool: ThreadPoolExecutor) -> tuple[Asset, ...]:
    standalone = pool.map(lambda p: inventory_standalone(tree.root, p), tree.image_paths)
    grouped = pool.map(lambda g: inventory_catalog_group(tree.root, g), tree.catalog_groups)
    assets = [a for batch in standalone for a in batch] + [a for batch in grouped for a in batch]
    return tuple(sorted(assets, key=lambda a: a.path))


def _read_sources(tree: SourceTree, pool: ThreadPoolExecutor) -> tuple[list[SourceFile], list[SkippedFile]]:
    ordered = sorted(tree.text_paths)
    results = pool.map(lambda item: read_source(tree.root, item[0], item[1]), ordered)
    sources: list[SourceFile] = []
    skipped: list[SkippedFile] = []
    for result in results:
        if isinstance(result, SkippedFile):
            skipped.append(result)
        else:
            sources.append(result)
    return sources, skipped


def analyze(root: str, config: CheckerConfig | None = None, rules: Iterable[Rule] | None = None) -> AnalysisReport:
    """Analyse the project under root. Raises NotADirectoryError if root is not a directory.

    rules defaults to every registered rule.
    """
    config = config or CheckerConfig()
    rules = list(registry.all_rules().values() if rules is None else rules)
    tree = scan_tree(root, config.fallback_extensions)

    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        assets = _inventory(tree, pool)
        compliance_future = pool.submit(run_compliance, assets, rules)

        sources, skipped = _read_sources(tree, pool)
        scans = list(pool.map(scan_source, sources))

        occurrences = [o for scan in scans for o in scan.references]
        templates = [t for scan in scans for t in scan.templates]
        dynamic = [d for scan in scans for d in scan.dynamic_references]
        table = BindingTable.fold(b for scan in scans for b in scan.bindings)
        logger.debug(
            '%d references, %d templates, %d bound identifiers, %d dynamic lookups',
            len(occurrences),
            len(templates),
            len(table),
            len(dynamic),
        )

        used_names = build_used_names(occurrences, templates, table, tree.bundle_images, config)
        usage = build_usage(assets, used_names, sources, dynamic, executor=pool)
        compliance = compliance_future.result()

    return AnalysisReport(
        root=root,
        assets=assets,
        usage=usage,
        compliance=compliance,
        skipped_files=tuple(skipped),
    )
