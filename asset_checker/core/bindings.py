"""Named value bindings that templated image names may substitute.

Three shapes are recognised, in Swift and Objective-C sources:

  constant     let logo = "company_logo"
               var selectedIcon: String = "Default"
               NSString *const kLogo = @"logo";   #define LOGO @"logo"
  collection   let icons: [String] = ["Green", "Orange"]
               NSArray *icons = @[@"Green", @"Orange"];
  enum case    case light = "theme_light"   (bound under `light`)

collect_bindings() is a pure per-file function. BindingTable.fold() merges
the per-file results: a later binding for the same identifier adds values,
it never replaces earlier ones.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from asset_checker.core.sources import SourceFile
from asset_checker.core.types import Binding

CONSTANT = 'constant'
COLLECTION = 'collection'
ENUM_CASE = 'enum-case'

_ELEMENT = re.compile(r'@?"((?:[^"\\\n]|\\.)*)"')


@dataclass(frozen=True)
class BindingRule:
    name: str
    pattern: re.Pattern
    shape: str


SWIFT_BINDING_RULES: tuple[BindingRule, ...] = (
    BindingRule(
        'swift-array',
        re.compile(r'(?:let|var)\s+(\w+)\s*(?::\s*\[String\]\s*)?=\s*\[([^\]]*)\]'),
        COLLECTION,
    ),
    BindingRule('swift-typed-string', re.compile(r'(?:let|var)\s+(\w+)\s*:\s*String\s*=[^\n"]*"([^"\n]*)"'), CONSTANT),
    BindingRule('swift-string', re.compile(r'(?:let|var)\s+(\w+)\s*=\s*"([^"\n]*)"'), CONSTANT),
    BindingRule('swift-enum-case', re.compile(r'case\s+(\w+)\s*=\s*"([^"\n]*)"'), ENUM_CASE),
)

OBJC_BINDING_RULES: tuple[BindingRule, ...] = (
    BindingRule(
        'objc-array',
        re.compile(r'NSArray\s*(?:<[^>]*>\s*)?\*\s*(?:const\s+)?(\w+)\s*=\s*@\[([^\]]*)\]'),
        COLLECTION,
    ),
    BindingRule('objc-nsstring', re.compile(r'NSString\s*\*\s*(?:const\s+)?(\w+)\s*=\s*@"([^"\n]*)"'), CONSTANT),
    BindingRule('objc-define', re.compile(r'#define\s+(\w+)\s+@"([^"\n]*)"'), CONSTANT),
)

BINDING_RULES_BY_CATEGORY: dict[str, tuple[BindingRule, ...]] = {
    'swift': SWIFT_BINDING_RULES,
    'objc': OBJC_BINDING_RULES,
}


def _values(rule: BindingRule, raw: str) -> list[str]:
    if rule.shape == COLLECTION:
        return [m.group(1) for m in _ELEMENT.finditer(raw) if m.group(1)]
    return [raw] if raw else []


def collect_bindings(source: SourceFile) -> tuple[Binding, ...]:
    """Bindings of one file, one per identifier, values in source order."""
    found: list[tuple[int, str, str]] = []  # (offset, identifier, value)
    for rule in BINDING_RULES_BY_CATEGORY.get(source.category, ()):
        for m in rule.pattern.finditer(source.text):
            for value in _values(rule, m.group(2)):
                found.append((m.start(), m.group(1), value))
    found.sort(key=lambda item: item[0])

    merged: dict[str, list[str]] = {}
    for _offset, identifier, value in found:
        bucket = merged.setdefault(identifier, [])
        if value not in bucket:
            bucket.append(value)
    return tuple(Binding(identifier=k, values=tuple(v)) for k, v in merged.items())


@dataclass(frozen=True)
class BindingTable:
    """identifier -> ordered, de-duplicated values, merged across files."""

    values: Mapping[str, tuple[str, ...]]

    @classmethod
    def fold(cls, bindings: Iterable[Binding]) -> BindingTable:
        merged: dict[str, list[str]] = {}
        for binding in bindings:
            bucket = merged.setdefault(binding.identifier, [])
            for value in binding.values:
                if value not in bucket:
                    bucket.append(value)
        return cls(MappingProxyType({k: tuple(v) for k, v in merged.items()}))

    def lookup(self, identifier: str) -> tuple[str, ...]:
        return self.values.get(identifier, ())

    def __contains__(self, identifier: str) -> bool:
        return identifier in self.values

    def __len__(self) -> int:
        return len(self.values)
