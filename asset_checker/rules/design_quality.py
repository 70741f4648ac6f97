"""Pixel dimension checks: scaling, minimum size, memory footprint.

Only assets whose dimensions could be read are checked.

    non-integer-scaling      an @2x/@3x image whose width or height does not
                             divide by its scale (renders blurry)
    too-small                both sides under 44 px (critical)
    inefficient-dimensions   more than 2 megapixels (critical)

Example:
    asset-tool design-quality ./MyApp --json
"""

from asset_checker.core.types import Asset, DesignIssueKind, DesignQualityIssue, IssueFamily, Rule

rule = Rule(
    name='design-quality',
    family=IssueFamily.DESIGN_QUALITY,
    help='Check scale divisibility, minimum size and oversized dimensions.',
)

MIN_SIDE = 44
MAX_PIXELS = 2_000_000


@rule.run
def run(assets: list[Asset]) -> list[DesignQualityIssue]:
    issues = []
    for asset in assets:
        if asset.dimensions is None:
            continue
        width, height = asset.dimensions
        scale = asset.scale

        if scale is not None and scale > 1 and (width % scale or height % scale):
            expected_w = width // scale * scale
            expected_h = height // scale * scale
            issues.append(
                DesignQualityIssue(
                    asset=asset,
                    recommendation=(
                        'Ensure dimensions scale to whole numbers '
                        f'(current: {width}×{height}, expected: {expected_w}×{expected_h})'
                    ),
                    kind=DesignIssueKind.NON_INTEGER_SCALING,
                    impact='May cause blurry rendering',
                )
            )

        if width < MIN_SIDE and height < MIN_SIDE:
            issues.append(
                DesignQualityIssue(
                    asset=asset,
                    recommendation='Increase size to at least 44×44 points for touch targets or 22×22 for small icons',
                    kind=DesignIssueKind.TOO_SMALL,
                    impact='May appear pixelated on high-resolution displays',
                )
            )

        pixels = width * height
        if pixels > MAX_PIXELS:
            issues.append(
                DesignQualityIssue(
                    asset=asset,
                    recommendation='Consider reducing dimensions or using progressive loading for large images',
                    kind=DesignIssueKind.INEFFICIENT_DIMENSIONS,
                    impact=f'High memory usage ({pixels / 1_000_000:.1f}MP)',
                )
            )
    return issues
