"""
markchunk

Recursive, structure-aware Markdown chunking for retrieval pipelines.
"""

from .chunking import Chunk, MarkdownSplitter, split_markdown
from .core.errors import ConfigurationError, StructuralWarning
from .core.models import SplitOptions

__version__ = "0.1.0"

__all__ = [
    "Chunk",
    "ConfigurationError",
    "MarkdownSplitter",
    "SplitOptions",
    "StructuralWarning",
    "split_markdown",
]
