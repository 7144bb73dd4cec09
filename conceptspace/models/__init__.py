"""
This package contains the truncated SVD of a term-document matrix and the concept space built on top of it.
"""

# bring model classes directly into package namespace, to save some typing
from .svd import SingularValueDecomposition, compute_svd  # noqa:F401
from .concepts import top_docs_in_top_concepts, top_terms_in_top_concepts  # noqa:F401
from .conceptspace import ConceptSpace  # noqa:F401
