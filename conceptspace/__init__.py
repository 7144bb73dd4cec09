"""
This package contains functionality to build a latent semantic (concept) space from a term-document matrix,
and to answer term and document similarity queries in that space.

"""

__version__ = "0.1.0.dev0"

import logging

from conceptspace import (  # noqa:F401
    corpora,
    distributed,
    matutils,
    models,
    similarities,
    utils,
)

logger = logging.getLogger("conceptspace")
if not logger.handlers:  # To ensure reload() doesn't add another one
    logger.addHandler(logging.NullHandler())
