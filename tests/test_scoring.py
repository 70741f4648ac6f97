"""Tests for asset_checker.core.scoring: counts and the 0-100 score."""

import pytest
from asset_checker.core.scoring import compliance_score, run_compliance, score_issues
from asset_checker.core.types import (
    Asset,
    AssetKind,
    ColorProfileIssue,
    ColorProfileKind,
    InterlacingIssue,
    IssueFamily,
    Rule,
)

ASSET = Asset(name='a', path='a.png', byte_size=1, kind=AssetKind.PNG, file_format='png')


class TestComplianceScore:
    def test_no_assets(self) -> None:
        assert compliance_score(5, 5, 0) == 100

    def test_no_issues(self) -> None:
        assert compliance_score(0, 0, 10) == 100

    def test_floors_each_term(self) -> None:
        # 60*1/7 = 8.57 -> 8, 30*2/7 = 8.57 -> 8
        assert compliance_score(1, 2, 7) == 84

    @pytest.mark.parametrize(('critical', 'warning', 'count'), [(10, 10, 1), (3, 0, 1), (0, 50, 2)])
    def test_clamped(self, critical: int, warning: int, count: int) -> None:
        assert 0 <= compliance_score(critical, warning, count) <= 100

    def test_more_critical_never_raises_score(self) -> None:
        scores = [compliance_score(c, 3, 10) for c in range(12)]
        assert scores == sorted(scores, reverse=True)


class TestScoreIssues:
    def test_counts(self) -> None:
        issues = {
            IssueFamily.INTERLACING: [
                InterlacingIssue(asset=ASSET, recommendation='', impact='critical'),
                InterlacingIssue(asset=ASSET, recommendation='', impact='medium'),
            ],
            IssueFamily.COLOR_PROFILE: [
                ColorProfileIssue(asset=ASSET, recommendation='', kind=ColorProfileKind.MISSING),
            ],
        }
        report = score_issues(issues, 4)
        assert (report.critical_count, report.warning_count, report.total_count) == (2, 1, 3)
        assert report.score == 100 - 30 - 7
        assert len(report.interlacing_issues) == 2
        assert report.catalog_issues == ()
        assert len(report.color_profile_issues) == 1

    def test_empty(self) -> None:
        report = score_issues({}, 0)
        assert report.score == 100
        assert report.total_count == 0


class TestRunCompliance:
    def test_rule_order_does_not_matter(self) -> None:
        first = Rule('b-interlacing', IssueFamily.INTERLACING)
        first.run(lambda assets: [InterlacingIssue(asset=a, recommendation='', impact='high') for a in assets])
        second = Rule('a-color', IssueFamily.COLOR_PROFILE)
        second.run(
            lambda assets: [
                ColorProfileIssue(asset=a, recommendation='', kind=ColorProfileKind.MISSING) for a in assets
            ]
        )
        assert run_compliance([ASSET], [first, second]) == run_compliance([ASSET], [second, first])
