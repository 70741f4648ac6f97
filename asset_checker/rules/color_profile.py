"""Check that every image carries a modern RGB colour profile.

Three independent checks per asset, so one image can raise two issues:

    missing        no profile or colour model could be read (critical)
    incompatible   the profile names none of RGB, sRGB, Display P3
    outdated       Adobe RGB, ProPhoto RGB or Generic RGB

Vector assets (PDF, SVG) have no readable profile and are reported as
missing too.

Example:
    asset-tool color-profile ./MyApp --json
"""

from asset_checker.core.types import Asset, ColorProfileIssue, ColorProfileKind, IssueFamily, Rule

rule = Rule(
    name='color-profile',
    family=IssueFamily.COLOR_PROFILE,
    help='Report missing, incompatible, or outdated colour profiles.',
)

RECOMMENDED_PROFILES = ('RGB', 'sRGB', 'Display P3', 'SRGB')
OUTDATED_PROFILES = ('Adobe RGB', 'ProPhoto RGB', 'Generic RGB')
DEFAULT_PROFILE = 'sRGB'


def is_recommended(profile: str) -> bool:
    return any(p in profile for p in RECOMMENDED_PROFILES)


def is_outdated(profile: str) -> bool:
    return any(p in profile for p in OUTDATED_PROFILES)


@rule.run
def run(assets: list[Asset]) -> list[ColorProfileIssue]:
    issues = []
    for asset in assets:
        profile = asset.color_profile
        if profile is None:
            issues.append(
                ColorProfileIssue(
                    asset=asset,
                    recommendation='Add sRGB color profile for consistent colors across devices',
                    kind=ColorProfileKind.MISSING,
                )
            )
            continue
        if not is_recommended(profile):
            issues.append(
                ColorProfileIssue(
                    asset=asset,
                    recommendation=f'Use {DEFAULT_PROFILE} color profile for better iOS compatibility',
                    kind=ColorProfileKind.INCOMPATIBLE,
                    current=profile,
                    recommended=DEFAULT_PROFILE,
                )
            )
        if is_outdated(profile):
            issues.append(
                ColorProfileIssue(
                    asset=asset,
                    recommendation='Update to modern color profile (sRGB or Display P3)',
                    kind=ColorProfileKind.OUTDATED,
                    current=profile,
                )
            )
    return issues
