"""
Core Package.

Contains the transformation machinery:
- JavaScript syntax model, front-end and emitter
- Syntax normalization pipeline
- Worklet and method-factory builders
- Tree transformer and file-level engine
"""
