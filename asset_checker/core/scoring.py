"""Fold rule output into a ComplianceReport with a 0-100 score.

    score = 100 - floor(60 * critical / N) - floor(30 * warning / N)

clamped to [0, 100], where N is the number of assets. No assets, score 100.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from asset_checker.core.types import Asset, ComplianceIssue, ComplianceReport, IssueFamily, Rule, Severity

logger = logging.getLogger('asset_checker.scoring')

CRITICAL_WEIGHT = 60
WARNING_WEIGHT = 30


def compliance_score(critical: int, warning: int, asset_count: int) -> int:
    if asset_count <= 0:
        return 100
    score = 100 - (CRITICAL_WEIGHT * critical) // asset_count - (WARNING_WEIGHT * warning) // asset_count
    return max(0, min(100, score))


def score_issues(
    issues_by_family: Mapping[IssueFamily, Sequence[ComplianceIssue]],
    asset_count: int,
) -> ComplianceReport:
    every = [issue for family in IssueFamily for issue in issues_by_family.get(family, ())]
    critical = sum(1 for issue in every if issue.severity is Severity.CRITICAL)
    total = len(every)
    warning = total - critical
    return ComplianceReport(
        interlacing_issues=tuple(issues_by_family.get(IssueFamily.INTERLACING, ())),
        color_profile_issues=tuple(issues_by_family.get(IssueFamily.COLOR_PROFILE, ())),
        catalog_issues=tuple(issues_by_family.get(IssueFamily.CATALOG, ())),
        design_quality_issues=tuple(issues_by_family.get(IssueFamily.DESIGN_QUALITY, ())),
        asset_count=asset_count,
        critical_count=critical,
        warning_count=warning,
        total_count=total,
        score=compliance_score(critical, warning, asset_count),
    )


def run_compliance(assets: Sequence[Asset], rules: Iterable[Rule]) -> ComplianceReport:
    """Run rules in name order and score the result."""
    issues: dict[IssueFamily, list[ComplianceIssue]] = {family: [] for family in IssueFamily}
    for rule in sorted(rules, key=lambda r: r.name):
        found = rule.execute(assets)
        logger.debug('rule %s: %d issues', rule.name, len(found))
        issues[rule.family].extend(found)
    return score_issues(issues, len(assets))
