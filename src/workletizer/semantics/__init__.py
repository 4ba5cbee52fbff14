"""
Semantics Package.

Static name tables describing the worklet runtime.

Modules:
    - ``ambient``: Default ambient names, blocked properties and recognized callees.
"""
