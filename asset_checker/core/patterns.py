"""Declarative table of asset access patterns, per source category.

Each ExtractionRule is a named regex plus a capture strategy:

  literal       group 1 is the asset name literal
  likely-image  every group is a candidate, kept only if it looks like an
                image name (icon/image/logo/button/background, or an image
                extension)
  format        group 1 is a C format string, group 2 its argument list;
                specifiers are rewritten as Swift-style placeholders so the
                result can be expanded like any other template

Adding a pattern is adding a row. iter_literals() is the only consumer-facing
entry point: it yields every captured literal with its rule and line number,
and both the reference extractor and the template detector read from it.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from collections.abc import Iterator
from dataclasses import dataclass

from asset_checker.core.types import IMAGE_EXTENSIONS

LITERAL = 'literal'
LIKELY_IMAGE = 'likely-image'
FORMAT = 'format'

_EXT = '|'.join(IMAGE_EXTENSIONS)
_NEWLINE = re.compile('\n')


@dataclass(frozen=True)
class ExtractionRule:
    name: str
    pattern: re.Pattern
    strategy: str = LITERAL


def _rule(name: str, pattern: str, strategy: str = LITERAL, flags: int = 0) -> ExtractionRule:
    return ExtractionRule(name=name, pattern=re.compile(pattern, flags), strategy=strategy)


SWIFT_RULES: tuple[ExtractionRule, ...] = (
    _rule('uiimage-named', r'UIImage\s*\(\s*named:\s*"([^"]+)"'),
    _rule('swiftui-image', r'\bImage\s*\(\s*"([^"]+)"'),
    _rule('uiimage-system-name', r'UIImage\s*\(\s*systemName:\s*"([^"]+)"'),
    _rule('image-literal', r'#imageLiteral\s*\(\s*resourceName:\s*"([^"]+)"'),
    _rule('uiimage-contents-of-file', r'UIImage\s*\(\s*contentsOfFile:\s*"([^"]+)"'),
    _rule('bundle-path-for-resource', r'Bundle\.main\.path\s*\(\s*forResource:\s*"([^"]+)"'),
    _rule('nsbundle-path-for-resource', r'NSBundle\.main\.pathForResource\s*\(\s*"([^"]+)"'),
    _rule('file-literal', rf'"([^"\n]*\.(?:{_EXT}))"', flags=re.IGNORECASE),
    _rule('let-constant', r'let\s+\w+\s*=\s*"([^"]+)"'),
    _rule('static-let-constant', r'static\s+let\s+\w+\s*=\s*"([^"]+)"'),
    _rule('enum-case', r'case\s+\w+\s*=\s*"([^"]+)"'),
    _rule('record-snapshot', r'recordSnapshot\s*\(\s*[^)]*named:\s*"([^"]+)"'),
    _rule('verify-view', r'verifyView\s*\(\s*[^)]*named:\s*"([^"]+)"'),
    _rule('fb-snapshot', r'FBSnapshotVerifyView\s*\(\s*[^)]*identifier:\s*"([^"]+)"'),
    _rule('clk-image-provider', r'CLKImageProvider\s*\(\s*onePieceImage:\s*UIImage\s*\(\s*named:\s*"([^"]+)"'),
    _rule('cocos-sprite', r'spriteWithFile:\s*@?"([^"]+)"'),
    _rule('image-with-contents-of-file', r'imageWithContentsOfFile:\s*@?"([^"]+)"'),
    _rule('cocos-menu-item', r'itemWithNormalImage:\s*@?"([^"]+)"'),
)

OBJC_RULES: tuple[ExtractionRule, ...] = (
    _rule('uiimage-image-named', r'\[UIImage\s+imageNamed:\s*@"([^"]+)"'),
    _rule('image-with-contents-of-file', r'imageWithContentsOfFile:[^"]*@"([^"]+)"'),
    _rule('nsbundle-path-for-resource', r'pathForResource:\s*@"([^"]+)"'),
    _rule('uiimage-named-macro', r'UIImageNamed\s*\(\s*@"([^"]+)"'),
    _rule('file-literal', rf'@"([^"\n]*\.(?:{_EXT}))"', flags=re.IGNORECASE),
    _rule('define-constant', r'#define\s+\w+\s+@"([^"]+)"'),
    _rule('nsstring-constant', r'NSString\s*\*\s*(?:const\s+)?\w+\s*=\s*@"([^"]+)"'),
    _rule('cocos-sprite', r'spriteWithFile:\s*@"([^"]+)"'),
    _rule('string-with-format', r'stringWithFormat:\s*@"([^"]*)"\s*,\s*([^\]]+)\]', strategy=FORMAT),
)

INTERFACE_BUILDER_RULES: tuple[ExtractionRule, ...] = (
    _rule('image-attr', r'\bimage="([^"]+)"'),
    _rule('image-name-attr', r'\bimageName="([^"]+)"'),
    _rule('image-element', r'<image\b[^>]+\bname="([^"]+)"'),
    _rule('image-view', r'<imageView\b[^>]+\bimage="([^"]+)"'),
    _rule('background-image-attr', r'\bbackgroundImage="([^"]+)"'),
    _rule('selected-image-attr', r'\bselectedImage="([^"]+)"'),
    _rule('tab-bar-item', r'<tabBarItem\b[^>]+\bimage="([^"]+)"'),
    _rule('navigation-title-view', r'<navigationItem\b[^>]+\btitleView="([^"]+)"'),
    _rule('button-background', r'<button\b[^>]+\bbackgroundImage="([^"]+)"'),
)

PLIST_RULES: tuple[ExtractionRule, ...] = (
    _rule('bundle-icon-name', r'<key>CFBundleIconName</key>\s*<string>([^<]+)</string>'),
    _rule('bundle-icon-file', r'<key>CFBundleIconFile</key>\s*<string>([^<]+)</string>'),
    _rule('launch-image-file', r'<key>UILaunchImageFile</key>\s*<string>([^<]+)</string>'),
    _rule('launch-storyboard', r'<key>UILaunchStoryboardName</key>\s*<string>([^<]+)</string>'),
    _rule('image-string', rf'<string>([^<]*\.(?:{_EXT}))</string>', flags=re.IGNORECASE),
)

STRINGS_RULES: tuple[ExtractionRule, ...] = (
    _rule('strings-entry', r'"([^"]*)"\s*=\s*"([^"]+)"\s*;', strategy=LIKELY_IMAGE),
)

RULES_BY_CATEGORY: dict[str, tuple[ExtractionRule, ...]] = {
    'swift': SWIFT_RULES,
    'objc': OBJC_RULES,
    'interface-builder': INTERFACE_BUILDER_RULES,
    'plist': PLIST_RULES,
    'strings': STRINGS_RULES,
}

# Categories whose literals may be loaded through a game/framework HD lookup
CODE_CATEGORIES = frozenset({'swift', 'objc'})

_LIKELY_IMAGE_WORDS = ('icon', 'image', 'logo', 'button', 'background')
_FORMAT_SPECIFIER = re.compile(r'%(?:@|l{0,2}[dius]|zd)')


def is_likely_image_name(text: str) -> bool:
    lowered = text.lower()
    if any(word in lowered for word in _LIKELY_IMAGE_WORDS):
        return True
    return lowered.endswith(tuple(f'.{ext}' for ext in IMAGE_EXTENSIONS))


def split_arguments(args: str) -> list[str]:
    """Split a C argument list on top-level commas."""
    parts = []
    depth = 0
    current = []
    for ch in args:
        if ch in '([{':
            depth += 1
        elif ch in ')]}':
            depth -= 1
        if ch == ',' and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)
    tail = ''.join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def format_to_template(fmt: str, args: str) -> str | None:
    """Rewrite @"icon_%@" with arg `name` as "icon_\\(name)". None if arity disagrees."""
    arguments = split_arguments(args)
    specifiers = _FORMAT_SPECIFIER.findall(fmt)
    if not specifiers or len(specifiers) > len(arguments):
        return None
    it = iter(arguments)
    return _FORMAT_SPECIFIER.sub(lambda _m: f'\\({next(it)})', fmt)


def split_template(literal: str) -> tuple[str, str, str] | None:
    """Split a literal at its first \\(...) placeholder into (prefix, expression, suffix).

    Parentheses inside the placeholder are balanced, so "\\(name(for: x))" yields
    "name(for: x)". None when the literal has no complete placeholder.
    """
    start = literal.find('\\(')
    if start < 0:
        return None
    depth = 0
    for i in range(start + 1, len(literal)):
        ch = literal[i]
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                expression = literal[start + 2 : i].strip()
                if not expression:
                    return None
                return literal[:start], expression, literal[i + 1 :]
    return None


def has_placeholder(literal: str) -> bool:
    return '\\(' in literal


class LineIndex:
    """Maps offsets in one text to 1-based line numbers."""

    def __init__(self, text: str):
        self._newlines = [m.start() for m in _NEWLINE.finditer(text)]

    def line_of(self, index: int) -> int:
        return bisect_left(self._newlines, index) + 1


LiteralMatch = tuple[ExtractionRule, str, int]


def iter_literals(text: str, category: str) -> Iterator[LiteralMatch]:
    """Yield (rule, literal, line) for every capture of every rule of the category."""
    rules = RULES_BY_CATEGORY.get(category, ())
    if not rules:
        return
    lines = LineIndex(text)
    for rule in rules:
        for m in rule.pattern.finditer(text):
            line = lines.line_of(m.start())
            if rule.strategy == LITERAL:
                yield rule, m.group(1), line
            elif rule.strategy == LIKELY_IMAGE:
                for value in m.groups():
                    if value and is_likely_image_name(value):
                        yield rule, value, line
            elif rule.strategy == FORMAT:
                template = format_to_template(m.group(1), m.group(2))
                if template is not None:
                    yield rule, template, line
            else:
                raise ValueError(f'Unknown capture strategy {rule.strategy!r} in rule {rule.name}')
