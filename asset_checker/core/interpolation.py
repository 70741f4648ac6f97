"""Templated image names and their statically reachable expansions.

A literal such as "AppIcon-\\(theme.rawValue)" is split at its first
placeholder into (prefix, placeholder, suffix). Resolution substitutes every
value the binding table holds for the placeholder (full expression, then its
last dotted segment, then its first), and falls back to the configured
inference table when nothing is bound. A candidate that still contains a
placeholder goes through another pass, up to max_expansion_depth passes.

Each resolved name is then widened the way runtime lookups are written:
without extension, last path segment (with role suffixes), or, for a name
without a directory, each substituted value under a common asset directory.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from asset_checker.core.bindings import BindingTable
from asset_checker.core.config import CheckerConfig
from asset_checker.core.patterns import CODE_CATEGORIES, LiteralMatch, has_placeholder, iter_literals, split_template
from asset_checker.core.references import strip_image_extension
from asset_checker.core.sources import SourceFile
from asset_checker.core.types import DynamicReference, TemplatePattern

_IDENT = r'[A-Za-z_][A-Za-z0-9_]*'

DYNAMIC_PATTERNS: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(pattern), description)
    for pattern, description in (
        (r'\bImage\s*\(\s*"[^"]*\\\([^)]+\)[^"]*"', 'String interpolation in Image()'),
        (r'UIImage\s*\(\s*named:\s*"[^"]*\\\([^)]+\)[^"]*"', 'String interpolation in UIImage(named:)'),
        (r'spriteWithFile:\s*@?"[^"]*\\\([^)]+\)[^"]*"', 'String interpolation in spriteWithFile:'),
        (rf'\bImage\s*\(\s*{_IDENT}\s*\)', 'Variable-based Image loading'),
        (rf'UIImage\s*\(\s*named:\s*{_IDENT}\s*\)', 'Variable-based UIImage loading'),
        (rf'\[UIImage\s+imageNamed:\s*{_IDENT}\s*\]', 'Variable-based imageNamed: loading'),
        (rf'spriteWithFile:\s*{_IDENT}\b', 'Variable-based spriteWithFile: loading'),
        (r'\bImage\s*\(\s*\w+\s*\([^)]*\)\s*\)', 'Function-generated Image name'),
        (r'UIImage\s*\(\s*named:\s*\w+\s*\([^)]*\)\s*\)', 'Function-generated UIImage name'),
        (r'spriteWithFile:\s*\w+\s*\([^)]*\)', 'Function-generated spriteWithFile: name'),
        (r'\bImage\s*\(\s*\w+\s*\[[^\]]+\]\s*\)', 'Subscript-based Image selection'),
        (r'UIImage\s*\(\s*named:\s*\w+\s*\[[^\]]+\]\s*\)', 'Subscript-based UIImage selection'),
        (r'\bImage\s*\(\s*\w+\.\w+\s*\)', 'Property-based Image loading'),
        (r'UIImage\s*\(\s*named:\s*\w+\.\w+\s*\)', 'Property-based UIImage loading'),
    )
)


def detect_templates(
    source: SourceFile, literals: Sequence[LiteralMatch] | None = None
) -> tuple[TemplatePattern, ...]:
    """Every templated literal the access-pattern table captures in one file."""
    if literals is None:
        literals = tuple(iter_literals(source.text, source.category))
    templates = []
    for _rule, literal, line in literals:
        if not has_placeholder(literal):
            continue
        parts = split_template(literal)
        if parts is None:
            continue
        prefix, placeholder, suffix = parts
        templates.append(
            TemplatePattern(
                prefix=prefix,
                placeholder=placeholder,
                suffix=suffix,
                source_file=source.path,
                line_number=line,
            )
        )
    return tuple(templates)


def detect_dynamic_references(source: SourceFile) -> tuple[DynamicReference, ...]:
    """Lines that load an image by a name computed at runtime."""
    if source.category not in CODE_CATEGORIES:
        return ()
    found = []
    for number, line in enumerate(source.text.splitlines(), start=1):
        for pattern, description in DYNAMIC_PATTERNS:
            if pattern.search(line):
                found.append(
                    DynamicReference(
                        source_file=source.path,
                        line_number=number,
                        description=description,
                        snippet=line.strip(),
                    )
                )
    return tuple(found)


def placeholder_values(pattern: TemplatePattern, table: BindingTable, config: CheckerConfig) -> tuple[str, ...]:
    placeholder = pattern.placeholder
    keys = (placeholder, placeholder.rsplit('.', 1)[-1], placeholder.split('.', 1)[0])
    for key in dict.fromkeys(keys):
        values = table.lookup(key)
        if values:
            return values
    return config.infer_values(pattern.prefix, placeholder)


def _substitute(
    pattern: TemplatePattern, table: BindingTable, config: CheckerConfig, chain: tuple[str, ...] = ()
) -> list[tuple[str, tuple[str, ...]]]:
    return [(pattern.render(value), chain + (value,)) for value in placeholder_values(pattern, table, config)]


def resolve_values(pattern: TemplatePattern, table: BindingTable, config: CheckerConfig) -> dict[str, set[str]]:
    """Fully substituted names for one pattern, each with the values substituted into it.

    Still-templated leftovers are dropped.
    """
    resolved: dict[str, set[str]] = {}
    pending = _substitute(pattern, table, config)
    for _ in range(config.max_expansion_depth - 1):
        templated = []
        for candidate, chain in pending:
            if has_placeholder(candidate):
                templated.append((candidate, chain))
            else:
                resolved.setdefault(candidate, set()).update(chain)
        if not templated:
            pending = []
            break
        pending = []
        for candidate, chain in templated:
            parts = split_template(candidate)
            if parts is None:
                continue
            inner = TemplatePattern(prefix=parts[0], placeholder=parts[1], suffix=parts[2])
            pending.extend(_substitute(inner, table, config, chain))
    for candidate, chain in pending:
        if not has_placeholder(candidate):
            resolved.setdefault(candidate, set()).update(chain)
    return resolved


def resolve_names(pattern: TemplatePattern, table: BindingTable, config: CheckerConfig) -> set[str]:
    return set(resolve_values(pattern, table, config))


def expand_candidate(name: str, config: CheckerConfig, values: Iterable[str] = ()) -> set[str]:
    """The forms a runtime lookup for `name` may take.

    values are the bound values substituted into name. A name without a
    directory also matches each value under a common asset directory.
    """
    names = {name, strip_image_extension(name)}
    if '/' in name:
        last = name.rsplit('/', 1)[-1]
        if last:
            names.add(last)
            names.add(strip_image_extension(last))
            names.update(f'{last}{suffix}' for suffix in config.role_suffixes)
    else:
        for value in values:
            if value and not has_placeholder(value):
                names.update(f'{directory}/{value}' for directory in config.asset_directories)
    return names


def resolve(pattern: TemplatePattern, table: BindingTable, config: CheckerConfig) -> set[str]:
    """Expanded candidate names for one template pattern."""
    candidates: set[str] = set()
    for name, values in resolve_values(pattern, table, config).items():
        candidates |= expand_candidate(name, config, sorted(values))
    return candidates


def resolve_all(patterns: Iterable[TemplatePattern], table: BindingTable, config: CheckerConfig) -> set[str]:
    candidates: set[str] = set()
    for pattern in patterns:
        candidates |= resolve(pattern, table, config)
    return candidates
