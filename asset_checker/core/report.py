"""Report builder: text and JSON output for asset-tool results."""

from __future__ import annotations

import json
from typing import Any

from asset_checker.core.types import (
    AnalysisReport,
    CatalogIssueKind,
    ColorProfileKind,
    ComplianceReport,
    DesignIssueKind,
    IssueFamily,
    Severity,
)

UNUSED = 'unused'
COMPLIANCE = 'compliance'
ALL_SECTIONS = (UNUSED, COMPLIANCE)

_FAMILY_TITLES = {
    IssueFamily.INTERLACING: 'PNG interlacing',
    IssueFamily.COLOR_PROFILE: 'Color profiles',
    IssueFamily.CATALOG: 'Asset Catalog organization',
    IssueFamily.DESIGN_QUALITY: 'Design quality',
}


def format_size(size: int) -> str:
    if size < 1024:
        return f'{size} B'
    if size < 1024 * 1024:
        return f'{size / 1024:.1f} KB'
    return f'{size / (1024 * 1024):.1f} MB'


def _family_lines(compliance: ComplianceReport, family: IssueFamily) -> list[str]:
    issues = compliance.issues(family)
    lines = [f'── {_FAMILY_TITLES[family]} ({len(issues)})']
    for issue in issues:
        mark = '✗' if issue.severity is Severity.CRITICAL else '!'
        lines.append(f'  {mark} {issue.asset.path}: {issue.describe()}')
        lines.append(f'      {issue.recommendation}')
    return lines


NO_ACTION_ITEMS = 'No critical issues found. Images follow Apple guidelines.'


def action_items(
    report: AnalysisReport,
    sections: tuple[str, ...] = ALL_SECTIONS,
    families: tuple[IssueFamily, ...] = tuple(IssueFamily),
) -> list[str]:
    """Prioritized fixes, most valuable first. Empty when nothing critical is found.

    Order: unused images, critical interlacing, missing color profiles,
    missing scale variants, then critical design issues. Only sections and
    families being reported contribute.
    """
    items = []
    compliance = report.compliance
    if UNUSED in sections and report.usage.unused:
        items.append(f'Remove {len(report.usage.unused)} unused images to save {format_size(report.unused_size)}')
    if COMPLIANCE not in sections:
        return items

    if IssueFamily.INTERLACING in families:
        critical = [i for i in compliance.interlacing_issues if i.impact == 'critical']
        if critical:
            items.append(f'Fix {len(critical)} critical PNG interlacing issues')
    if IssueFamily.COLOR_PROFILE in families:
        missing = [i for i in compliance.color_profile_issues if i.kind is ColorProfileKind.MISSING]
        if missing:
            items.append(f'Add color profiles to {len(missing)} images')
    if IssueFamily.CATALOG in families:
        variants = [i for i in compliance.catalog_issues if i.kind is CatalogIssueKind.MISSING_SCALE_VARIANT]
        if variants:
            items.append(f'Add missing scale variants for {len(variants)} images')
    if IssueFamily.DESIGN_QUALITY in families:
        design = [
            i
            for i in compliance.design_quality_issues
            if i.kind in (DesignIssueKind.TOO_SMALL, DesignIssueKind.INEFFICIENT_DIMENSIONS)
        ]
        if design:
            items.append(f'Address {len(design)} design quality issues')
    return items


def _action_lines(items: list[str]) -> list[str]:
    lines = ['── Prioritized action items']
    if not items:
        lines.append(f'  ✓ {NO_ACTION_ITEMS}')
    lines.extend(f'  {n}. {item}' for n, item in enumerate(items, start=1))
    return lines


def format_text(
    report: AnalysisReport,
    sections: tuple[str, ...] = ALL_SECTIONS,
    families: tuple[IssueFamily, ...] = tuple(IssueFamily),
) -> str:
    """Format report as human-readable text."""
    usage = report.usage
    compliance = report.compliance
    lines = [
        f'asset-tool: {report.root} ({len(report.assets)} images, {format_size(report.total_size)})',
        '',
    ]

    if UNUSED in sections:
        lines.append(f'── Unused images ({len(usage.unused)}, {format_size(report.unused_size)})')
        for asset in usage.unused:
            lines.append(f'  {asset.path}  {format_size(asset.byte_size)}')
        if usage.exempt:
            lines.append(f'  ({len(usage.exempt)} exempt: test, watch or system-managed)')
        if usage.dynamic_references:
            lines.append(f'  {len(usage.dynamic_references)} dynamic image lookups; some images may be loaded at runtime')
            for ref in usage.dynamic_references:
                lines.append(f'    {ref.source_file}:{ref.line_number} {ref.description}')
        lines.append('')

    if COMPLIANCE in sections:
        for family in families:
            lines.extend(_family_lines(compliance, family))
            lines.append('')
        lines.append(
            f'Compliance score {compliance.score}/100  '
            f'critical {compliance.critical_count}  warning {compliance.warning_count}  '
            f'total {compliance.total_count}'
        )

    if lines[-1]:
        lines.append('')
    lines.extend(_action_lines(action_items(report, sections, families)))

    if report.skipped_files:
        lines.append('')
        lines.append(f'Skipped {len(report.skipped_files)} unreadable file(s):')
        for skipped in report.skipped_files:
            lines.append(f'  {skipped.path}: {skipped.reason}')
    return '\n'.join(lines)


def compliance_dict(compliance: ComplianceReport, families: tuple[IssueFamily, ...] = tuple(IssueFamily)) -> dict:
    obj: dict[str, Any] = {
        'score': compliance.score,
        'critical': compliance.critical_count,
        'warning': compliance.warning_count,
        'total': compliance.total_count,
    }
    for family in families:
        obj[family.value] = [issue.to_dict() for issue in compliance.issues(family)]
    return obj


def format_json(
    report: AnalysisReport,
    sections: tuple[str, ...] = ALL_SECTIONS,
    families: tuple[IssueFamily, ...] = tuple(IssueFamily),
) -> str:
    """Format report as JSON."""
    usage = report.usage
    obj: dict[str, Any] = {
        'root': report.root,
        'summary': {
            'total_images': len(report.assets),
            'total_size': report.total_size,
            'unused_images': len(usage.unused),
            'unused_size': report.unused_size,
            'compliance_score': report.compliance.score,
        },
    }
    if UNUSED in sections:
        obj['unused'] = [asset.to_dict() for asset in usage.unused]
        obj['exempt'] = [{'image': asset.to_dict(), 'reason': reason} for asset, reason in usage.exempt]
        obj['dynamic_references'] = [
            {
                'file': ref.source_file,
                'line': ref.line_number,
                'description': ref.description,
                'snippet': ref.snippet,
            }
            for ref in usage.dynamic_references
        ]
    if COMPLIANCE in sections:
        obj['compliance'] = compliance_dict(report.compliance, families)
    obj['action_items'] = action_items(report, sections, families)
    obj['skipped_files'] = [{'path': s.path, 'reason': s.reason} for s in report.skipped_files]
    return json.dumps(obj, indent=2)
