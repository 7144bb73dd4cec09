"""
This package contains the corpus reader and the term-document matrix assembly feeding the concept space.
"""

# bring corpus classes directly into package namespace, to save some typing
from .textcorpus import LineCorpus  # noqa:F401
from .termdoc import term_document_matrix  # noqa:F401
