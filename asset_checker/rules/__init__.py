"""Compliance rule families.

Each module here defines one `rule = Rule(...)` plus its `@rule.run`
function, and asset_checker.registry.discover() picks it up by scanning this
package. The module docstring is the rule's `asset-tool help` text.
"""
