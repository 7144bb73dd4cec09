"""
This package contains implementations of similarity queries in a latent concept space.
"""

from .conceptsim import (  # noqa:F401
    DEFAULT_TOPN,
    terms_to_query_vector,
    top_docs_for_doc,
    top_docs_for_term,
    top_docs_for_term_query,
    top_terms_for_term,
)
