"""
Dashboard state module.

Immutable session state, the pure transitions applied per external event,
and the generation counters used to drop superseded responses.
"""
