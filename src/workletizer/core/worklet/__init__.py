"""
Worklet Construction Package.

Modules:
    - ``hashing``: Content hash of the serialized worklet.
    - ``builder``: General case, a function becomes a self-describing wrapper.
    - ``factory``: Object-method case, a method gains a paired factory property.
"""
