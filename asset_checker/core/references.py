"""Literal asset references found through the access-pattern table.

extract_references() is a pure per-file function; the engine runs it on every
text source in parallel and concatenates the results. normalize() turns an
occurrence into the name forms it may match: the literal itself, the literal
without its image extension and, for code files, the framework HD variants
(-hd, @2x, -ipad ...) some game engines resolve at load time.

There is no notion of scope: a literal anywhere counts everywhere.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence

from asset_checker.core.patterns import CODE_CATEGORIES, LiteralMatch, has_placeholder, iter_literals
from asset_checker.core.sources import SourceFile, category_for
from asset_checker.core.types import IMAGE_EXTENSIONS, ReferenceOccurrence

_HD_EXTENSIONS = ('.png', '.jpg', '.jpeg')


def extract_references(
    source: SourceFile, literals: Sequence[LiteralMatch] | None = None
) -> tuple[ReferenceOccurrence, ...]:
    """All pure (non-templated) literals matched in one source file.

    literals, when given, is the iter_literals() output already computed for source.
    """
    if literals is None:
        literals = tuple(iter_literals(source.text, source.category))
    occurrences = []
    for rule, literal, line in literals:
        literal = literal.strip()
        if not literal or has_placeholder(literal):
            continue
        occurrences.append(
            ReferenceOccurrence(literal=literal, source_file=source.path, line_number=line, rule=rule.name)
        )
    return tuple(occurrences)


def strip_image_extension(name: str) -> str:
    """name without a trailing image extension; unchanged if it has none."""
    base, ext = os.path.splitext(name)
    if base and ext[1:].lower() in IMAGE_EXTENSIONS:
        return base
    return name


def hd_variants(name: str, hd_suffixes: Iterable[str]) -> set[str]:
    base = name
    for ext in _HD_EXTENSIONS:
        if base.lower().endswith(ext):
            base = base[: -len(ext)]
            break
    variants = {base, f'{base}.png', f'{base}.jpg'}
    for suffix in hd_suffixes:
        variants.add(f'{base}{suffix}')
        variants.add(f'{base}{suffix}.png')
        variants.add(f'{base}{suffix}.jpg')
    return variants


def normalize(occurrence: ReferenceOccurrence, hd_suffixes: Iterable[str] = ()) -> set[str]:
    names = {occurrence.literal, strip_image_extension(occurrence.literal)}
    if category_for(occurrence.source_file) in CODE_CATEGORIES:
        names |= hd_variants(occurrence.literal, hd_suffixes)
    return names


def reference_names(occurrences: Iterable[ReferenceOccurrence], hd_suffixes: Iterable[str] = ()) -> set[str]:
    hd_suffixes = tuple(hd_suffixes)
    names: set[str] = set()
    for occurrence in occurrences:
        names |= normalize(occurrence, hd_suffixes)
    return names
