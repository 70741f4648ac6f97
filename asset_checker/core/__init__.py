"""asset_checker.core: foundation layer.

Contains the type definitions, source tree scan, asset inventory, reference
and binding extraction, template resolution, usage classification, scoring,
config and report builder. Nothing here imports asset_checker.rules; the
engine reaches rules only through asset_checker.registry.
Only stdlib and PIL are allowed here.
"""
