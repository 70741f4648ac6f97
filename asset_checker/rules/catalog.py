"""Asset Catalog organisation: misplaced files and incomplete scale sets.

Standalone images that look like UI elements (name contains icon, button,
background or ui; path contains "assets"; name carries an @Nx suffix) should
live in an Asset Catalog.

Per catalog group (.imageset):
    missing-scale-variant   one of @1x/@2x/@3x is absent (critical)
    orphaned-scale          the group is a single @2x or @3x variant

A lone @2x group raises both.

Example:
    asset-tool catalog ./MyApp
"""

from asset_checker.core.types import Asset, CatalogIssueKind, CatalogOrganizationIssue, IssueFamily, Rule

rule = Rule(
    name='catalog',
    family=IssueFamily.CATALOG,
    help='Find images that belong in an Asset Catalog and incomplete scale sets.',
)

REQUIRED_SCALES = (1, 2, 3)
_UI_WORDS = ('icon', 'button', 'background', 'ui')


def should_be_in_catalog(asset: Asset) -> bool:
    name = asset.name.lower()
    return any(w in name for w in _UI_WORDS) or 'assets' in asset.path.lower() or '@' in asset.name


def _groups(assets: list[Asset]) -> dict[str, list[Asset]]:
    groups: dict[str, list[Asset]] = {}
    for asset in assets:
        if asset.catalog_group is not None:
            groups.setdefault(asset.catalog_group, []).append(asset)
    return groups


@rule.run
def run(assets: list[Asset]) -> list[CatalogOrganizationIssue]:
    issues = [
        CatalogOrganizationIssue(
            asset=a,
            recommendation='Move to Asset Catalog for better iOS optimization and management',
            kind=CatalogIssueKind.SHOULD_BE_IN_CATALOG,
        )
        for a in assets
        if not a.is_catalog_variant and should_be_in_catalog(a)
    ]

    for _group, variants in sorted(_groups(assets).items()):
        present = {v.scale for v in variants}
        missing = tuple(f'@{s}x' for s in REQUIRED_SCALES if s not in present)
        if missing:
            issues.append(
                CatalogOrganizationIssue(
                    asset=variants[0],
                    recommendation=f'Add missing scale variants: {", ".join(missing)} for optimal iOS display',
                    kind=CatalogIssueKind.MISSING_SCALE_VARIANT,
                    scales=missing,
                )
            )
        only = variants[0]
        if len(variants) == 1 and only.scale is not None and only.scale > 1:
            issues.append(
                CatalogOrganizationIssue(
                    asset=only,
                    recommendation='Add @1x base variant for complete scale set',
                    kind=CatalogIssueKind.ORPHANED_SCALE,
                    scales=(f'@{only.scale}x',),
                )
            )
    return issues
