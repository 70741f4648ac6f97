"""Shared types for asset-tool: Asset, references, bindings, issues, reports, Rule."""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

IMAGE_EXTENSIONS = ('png', 'jpg', 'jpeg', 'gif', 'svg', 'pdf')


class AssetKind(str, enum.Enum):
    PNG = 'png'
    JPEG = 'jpeg'
    PDF = 'pdf'
    SVG = 'svg'
    CATALOG_VARIANT = 'catalog-variant'


@dataclass(frozen=True)
class Asset:
    """A discovered image. Built once per scan by the inventory, never mutated."""

    name: str  # catalog group name, or filename without extension
    path: str  # POSIX path relative to the scan root
    byte_size: int
    kind: AssetKind
    file_format: str  # container format: png / jpeg / pdf / svg
    scale: int | None = None
    dimensions: tuple[int, int] | None = None  # (width, height) in pixels
    is_interlaced: bool | None = None  # None = unknown
    color_profile: str | None = None
    catalog_group: str | None = None  # root-relative .imageset directory

    @property
    def is_catalog_variant(self) -> bool:
        return self.kind is AssetKind.CATALOG_VARIANT

    @property
    def pixel_area(self) -> int | None:
        if self.dimensions is None:
            return None
        return self.dimensions[0] * self.dimensions[1]

    def to_dict(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'path': self.path,
            'size': self.byte_size,
            'type': self.kind.value if not self.is_catalog_variant else f'catalog-variant-{self.scale}x',
            'format': self.file_format,
            'scale': self.scale,
            'dimensions': list(self.dimensions) if self.dimensions else None,
            'interlaced': self.is_interlaced,
            'color_profile': self.color_profile,
        }


@dataclass(frozen=True)
class ReferenceOccurrence:
    """A literal asset name found in a direct access pattern."""

    literal: str
    source_file: str
    line_number: int
    rule: str = ''


@dataclass(frozen=True)
class Binding:
    """An identifier and the literal values it was statically seen to hold."""

    identifier: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class TemplatePattern:
    """A templated reference: prefix + <placeholder> + suffix.

    The suffix may itself contain further placeholders; those are expanded in
    a later pass once this one has been substituted.
    """

    prefix: str
    placeholder: str
    suffix: str
    source_file: str = ''
    line_number: int = 0

    def render(self, value: str) -> str:
        return f'{self.prefix}{value}{self.suffix}'


@dataclass(frozen=True)
class DynamicReference:
    """An asset lookup whose name is computed at runtime. Diagnostic only."""

    source_file: str
    line_number: int
    description: str
    snippet: str


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: str


# ---------------------------------------------------------------------------
# Compliance issues
# ---------------------------------------------------------------------------


class Severity(str, enum.Enum):
    CRITICAL = 'critical'
    WARNING = 'warning'


class IssueFamily(str, enum.Enum):
    INTERLACING = 'interlacing'
    COLOR_PROFILE = 'color-profile'
    CATALOG = 'catalog'
    DESIGN_QUALITY = 'design-quality'


class ColorProfileKind(str, enum.Enum):
    MISSING = 'missing'
    INCOMPATIBLE = 'incompatible'
    OUTDATED = 'outdated'


class CatalogIssueKind(str, enum.Enum):
    SHOULD_BE_IN_CATALOG = 'should-be-in-catalog'
    MISSING_SCALE_VARIANT = 'missing-scale-variant'
    ORPHANED_SCALE = 'orphaned-scale'


class DesignIssueKind(str, enum.Enum):
    NON_INTEGER_SCALING = 'non-integer-scaling'
    TOO_SMALL = 'too-small'
    INEFFICIENT_DIMENSIONS = 'inefficient-dimensions'


@dataclass(frozen=True)
class ComplianceIssue:
    """Base of the closed issue family. Use one of the four subclasses."""

    family: ClassVar[IssueFamily]

    asset: Asset
    recommendation: str

    @property
    def severity(self) -> Severity:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {
            'image': self.asset.to_dict(),
            'family': self.family.value,
            'severity': self.severity.value,
            'description': self.describe(),
            'recommendation': self.recommendation,
        }


@dataclass(frozen=True)
class InterlacingIssue(ComplianceIssue):
    family: ClassVar[IssueFamily] = IssueFamily.INTERLACING

    impact: str  # critical / high / medium / unknown

    @property
    def severity(self) -> Severity:
        return Severity.CRITICAL if self.impact == 'critical' else Severity.WARNING

    def describe(self) -> str:
        return f'{self.impact.capitalize()} impact'


@dataclass(frozen=True)
class ColorProfileIssue(ComplianceIssue):
    family: ClassVar[IssueFamily] = IssueFamily.COLOR_PROFILE

    kind: ColorProfileKind
    current: str | None = None
    recommended: str | None = None

    @property
    def severity(self) -> Severity:
        return Severity.CRITICAL if self.kind is ColorProfileKind.MISSING else Severity.WARNING

    def describe(self) -> str:
        if self.kind is ColorProfileKind.MISSING:
            return 'Missing color profile'
        if self.kind is ColorProfileKind.INCOMPATIBLE:
            return f'Incompatible profile ({self.current} → {self.recommended})'
        return f'Outdated profile ({self.current})'


@dataclass(frozen=True)
class CatalogOrganizationIssue(ComplianceIssue):
    family: ClassVar[IssueFamily] = IssueFamily.CATALOG

    kind: CatalogIssueKind
    scales: tuple[str, ...] = ()  # '@1x' style labels

    @property
    def severity(self) -> Severity:
        return Severity.CRITICAL if self.kind is CatalogIssueKind.MISSING_SCALE_VARIANT else Severity.WARNING

    def describe(self) -> str:
        if self.kind is CatalogIssueKind.SHOULD_BE_IN_CATALOG:
            return 'Should be in Asset Catalog'
        if self.kind is CatalogIssueKind.MISSING_SCALE_VARIANT:
            return f'Missing scale variants: {", ".join(self.scales)}'
        return f'Orphaned scale variant: {", ".join(self.scales)}'


@dataclass(frozen=True)
class DesignQualityIssue(ComplianceIssue):
    family: ClassVar[IssueFamily] = IssueFamily.DESIGN_QUALITY

    kind: DesignIssueKind
    impact: str = ''

    @property
    def severity(self) -> Severity:
        if self.kind in (DesignIssueKind.TOO_SMALL, DesignIssueKind.INEFFICIENT_DIMENSIONS):
            return Severity.CRITICAL
        return Severity.WARNING

    def describe(self) -> str:
        return self.impact


ISSUE_TYPES: dict[IssueFamily, type[ComplianceIssue]] = {
    IssueFamily.INTERLACING: InterlacingIssue,
    IssueFamily.COLOR_PROFILE: ColorProfileIssue,
    IssueFamily.CATALOG: CatalogOrganizationIssue,
    IssueFamily.DESIGN_QUALITY: DesignQualityIssue,
}


@dataclass(frozen=True)
class ComplianceReport:
    """Issues per family plus the folded counts and score. Read-only."""

    interlacing_issues: tuple[InterlacingIssue, ...] = ()
    color_profile_issues: tuple[ColorProfileIssue, ...] = ()
    catalog_issues: tuple[CatalogOrganizationIssue, ...] = ()
    design_quality_issues: tuple[DesignQualityIssue, ...] = ()
    asset_count: int = 0
    critical_count: int = 0
    warning_count: int = 0
    total_count: int = 0
    score: int = 100

    def issues(self, family: IssueFamily) -> tuple[ComplianceIssue, ...]:
        if family is IssueFamily.INTERLACING:
            return self.interlacing_issues
        if family is IssueFamily.COLOR_PROFILE:
            return self.color_profile_issues
        if family is IssueFamily.CATALOG:
            return self.catalog_issues
        if family is IssueFamily.DESIGN_QUALITY:
            return self.design_quality_issues
        raise KeyError(f'Unknown issue family: {family!r}')


# ---------------------------------------------------------------------------
# Usage and the combined report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UsageResult:
    used_names: frozenset[str] = frozenset()
    unused: tuple[Asset, ...] = ()
    exempt: tuple[tuple[Asset, str], ...] = ()  # (asset, reason)
    dynamic_references: tuple[DynamicReference, ...] = ()


@dataclass(frozen=True)
class AnalysisReport:
    root: str
    assets: tuple[Asset, ...]
    usage: UsageResult
    compliance: ComplianceReport
    skipped_files: tuple[SkippedFile, ...] = ()

    @property
    def total_size(self) -> int:
        return sum(a.byte_size for a in self.assets)

    @property
    def unused_size(self) -> int:
        return sum(a.byte_size for a in self.usage.unused)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class Rule:
    """A self-registering compliance rule family.

    Usage in a rule module:

        rule = Rule(name='interlacing', family=IssueFamily.INTERLACING, help='...')

        @rule.run
        def run(assets):
            return [...]
    """

    def __init__(self, name: str, family: IssueFamily, help: str = ''):
        self.name = name
        self.family = family
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, assets: Sequence[Asset]) -> list[ComplianceIssue]:
        """Execute the rule's run function over the whole asset collection."""
        if self._run_fn is None:
            raise RuntimeError(f'Rule {self.name} has no run function')
        issues = list(self._run_fn(assets))
        expected = ISSUE_TYPES[self.family]
        for issue in issues:
            if not isinstance(issue, expected):
                raise TypeError(f'Rule {self.name} produced {type(issue).__name__}, expected {expected.__name__}')
        return issues

