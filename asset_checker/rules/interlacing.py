"""Flag interlaced PNGs. Impact grows with pixel area.

iOS decodes interlaced (Adam7) PNGs on a slower path and keeps more of the
image in memory while doing so. Every PNG container is checked, standalone
files and catalog variants alike. Only a header that positively reports
interlacing is flagged; an unreadable header is not.

Impact labels:
    critical   more than 1,000,000 pixels (counts as a critical issue)
    high       more than 100,000 pixels
    medium     anything smaller
    unknown    dimensions could not be read

Example:
    asset-tool interlacing ./MyApp
"""

from asset_checker.core.types import Asset, InterlacingIssue, IssueFamily, Rule

rule = Rule(
    name='interlacing',
    family=IssueFamily.INTERLACING,
    help='Flag interlaced PNG files, weighted by pixel area.',
)

RECOMMENDATION = 'Convert to de-interlaced PNG for better iOS performance and memory usage'


def impact_for(asset: Asset) -> str:
    area = asset.pixel_area
    if area is None:
        return 'unknown'
    if area > 1_000_000:
        return 'critical'
    if area > 100_000:
        return 'high'
    return 'medium'


@rule.run
def run(assets: list[Asset]) -> list[InterlacingIssue]:
    return [
        InterlacingIssue(asset=a, recommendation=RECOMMENDATION, impact=impact_for(a))
        for a in assets
        if a.file_format == 'png' and a.is_interlaced is True
    ]
