"""
Syntax Normalization Package.

Lowers a worklet to the syntax subset understood by the worklet runtime's
interpreter before it is serialized.
"""

from workletizer.core.normalizer.pipeline import NormalizationPipeline, normalize

__all__ = ["NormalizationPipeline", "normalize"]
