"""
Static Analysis Package.

Read-only passes over a normalized worklet that decide what the generated
wrapper has to carry.

Modules:
    - ``scopes``: Scope stack used to resolve local bindings.
    - ``classifier``: Separates captured identifiers from ambient and local ones.
    - ``closure``: Path trie of the property chains each capture actually reads.
    - ``optimization``: Advisory fast-path flags for style worklets.
"""
