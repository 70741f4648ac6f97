"""Tunable tables and knobs for asset-tool.

The inference table is a list of guesses used when a templated image name
(e.g. "icon_\\(theme)") has no statically visible binding. Projects can
replace any of these values with a JSON file:

    {
      "inference_rules": [
        {"keywords": ["flavor"], "values": ["Vanilla", "Chocolate"]}
      ],
      "role_suffixes": ["Icon", "Glyph"],
      "workers": 4
    }

Passed with --config, or via ASSET_TOOL_CONFIG. ASSET_TOOL_WORKERS overrides
the worker count from either source.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from typing import Any

CONFIG_ENV = 'ASSET_TOOL_CONFIG'
WORKERS_ENV = 'ASSET_TOOL_WORKERS'


class ConfigError(ValueError):
    """Raised when a config file or env override is unusable."""


@dataclass(frozen=True)
class InferenceRule:
    """Candidate values for placeholders whose prefix/name contains a keyword."""

    keywords: tuple[str, ...]
    values: tuple[str, ...]

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        return any(k.lower() in lowered for k in self.keywords)


DEFAULT_INFERENCE_RULES: tuple[InferenceRule, ...] = (
    InferenceRule(
        keywords=('icon', 'theme', 'color'),
        values=(
            'Default',
            'Green',
            'Orange',
            'Purple',
            'Red',
            'Blue',
            'Yellow',
            'Silver',
            'Space Gray',
            'Dark',
            'Light',
        ),
    ),
    InferenceRule(keywords=('size',), values=('Small', 'Medium', 'Large', 'XL', 'XXL')),
    InferenceRule(keywords=('device',), values=('iPhone', 'iPad', 'TV', 'Watch', 'Mac')),
    InferenceRule(keywords=('state',), values=('Normal', 'Active', 'Selected', 'Disabled', 'Highlighted')),
)


@dataclass(frozen=True)
class CheckerConfig:
    inference_rules: tuple[InferenceRule, ...] = DEFAULT_INFERENCE_RULES
    role_suffixes: tuple[str, ...] = ('Icon', 'Button', 'Background', 'Image')
    asset_directories: tuple[str, ...] = ('Icons', 'Images', 'Themes', 'Assets')
    hd_suffixes: tuple[str, ...] = ('-hd', '@2x', '@3x', '-ipad', '-ipadhd')
    # extra text files searched only by the raw-substring fallback
    fallback_extensions: tuple[str, ...] = ('json', 'html', 'css', 'js', 'xml', 'txt', 'md')
    max_expansion_depth: int = 4
    workers: int = 8

    def infer_values(self, *texts: str) -> tuple[str, ...]:
        """Values of the first inference rule whose keywords occur in any text."""
        for rule in self.inference_rules:
            if any(rule.matches(t) for t in texts):
                return rule.values
        return ()


def _string_tuple(key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f'{key}: expected a list of strings')
    return tuple(value)


def _positive_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f'{key}: expected a positive integer')
    return value


def _parse_inference_rules(value: Any) -> tuple[InferenceRule, ...]:
    if not isinstance(value, list):
        raise ConfigError('inference_rules: expected a list')
    rules = []
    for i, entry in enumerate(value):
        if not isinstance(entry, dict) or set(entry) != {'keywords', 'values'}:
            raise ConfigError(f'inference_rules[{i}]: expected {{"keywords": [...], "values": [...]}}')
        rules.append(
            InferenceRule(
                keywords=_string_tuple(f'inference_rules[{i}].keywords', entry['keywords']),
                values=_string_tuple(f'inference_rules[{i}].values', entry['values']),
            )
        )
    return tuple(rules)


def parse_config(data: dict[str, Any], base: CheckerConfig | None = None) -> CheckerConfig:
    """Apply a decoded JSON object on top of base (defaults if None)."""
    config = base or CheckerConfig()
    if not isinstance(data, dict):
        raise ConfigError('config root must be a JSON object')
    known = {f.name for f in fields(CheckerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f'unknown config keys: {", ".join(unknown)}')

    changes: dict[str, Any] = {}
    for key, value in data.items():
        if key == 'inference_rules':
            changes[key] = _parse_inference_rules(value)
        elif key in ('max_expansion_depth', 'workers'):
            changes[key] = _positive_int(key, value)
        else:
            changes[key] = _string_tuple(key, value)
    return replace(config, **changes)


def load_config(path: str | None = None) -> CheckerConfig:
    """Defaults, then the JSON file at path (or $ASSET_TOOL_CONFIG), then $ASSET_TOOL_WORKERS."""
    config = CheckerConfig()
    path = path or os.environ.get(CONFIG_ENV)
    if path:
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except OSError as exc:
            raise ConfigError(f'cannot read config {path}: {exc}') from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f'invalid JSON in {path}: {exc}') from exc
        config = parse_config(data, config)

    workers = os.environ.get(WORKERS_ENV)
    if workers:
        try:
            config = replace(config, workers=_positive_int(WORKERS_ENV, int(workers)))
        except ValueError as exc:
            raise ConfigError(f'{WORKERS_ENV}: expected a positive integer, got {workers!r}') from exc
    return config
