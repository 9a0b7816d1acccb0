"""
Market data module.

Immutable snapshot and price-series models, and the parsers that map the
provider's markets-list and market-chart payloads onto them.
"""
