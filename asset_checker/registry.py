"""Compliance rule auto-discovery and registration.

Scans asset_checker/rules/ for modules that define a `rule` object of type
Rule and collects them into a dict keyed by rule name. Modules whose name
starts with an underscore are skipped. Two modules claiming the same rule
name is an error.
"""

import importlib
import pkgutil
from types import ModuleType

from asset_checker.core.types import Rule

_registry: dict[str, Rule] = {}
_modules: dict[str, ModuleType] = {}


def register(module: ModuleType) -> Rule | None:
    """Register the module's `rule`, if it has one."""
    rule = getattr(module, 'rule', None)
    if not isinstance(rule, Rule):
        return None
    owner = _modules.get(rule.name)
    if owner is not None and owner is not module:
        raise RuntimeError(f'Rule {rule.name!r} defined by both {owner.__name__} and {module.__name__}')
    _registry[rule.name] = rule
    _modules[rule.name] = module
    return rule


def discover() -> dict[str, Rule]:
    """Import all rule modules and return the registry."""
    if _registry:
        return _registry

    import asset_checker.rules as pkg

    names = sorted(
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    )
    for modname in names:
        register(importlib.import_module(f'{pkg.__name__}.{modname}'))

    return _registry


def get(name: str) -> Rule:
    """Get a rule by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown rule: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_rules() -> dict[str, Rule]:
    """Return all registered rules, in name order."""
    reg = discover()
    return {name: reg[name] for name in sorted(reg)}


def module_for(name: str) -> ModuleType:
    """The module that defines a rule (its docstring is the rule's documentation)."""
    get(name)
    return _modules[name]
