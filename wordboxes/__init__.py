"""
Word box extraction for laid-out documents.

Tokenization of text runs into words and delimiters, hierarchical group
aggregation, JSON export, and merged page rendering with box overlays.
"""

from .pipeline import ExtractionConfig, ExtractionResult, WordBoxPipeline

__all__ = [
    "ExtractionConfig",
    "ExtractionResult",
    "WordBoxPipeline",
]
