#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2010 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Describe the leading concepts (latent dimensions) of a decomposition by their most heavily loaded terms and
documents.

A concept is one column of `V` (terms x concepts) and the corresponding column of `U` (documents x concepts),
concept #0 being the one with the largest singular value. Terms are ranked by their signed weight in the concept's
column of `V`, documents by their signed weight in the column of `U`.

"""

import logging

from conceptspace import matutils

logger = logging.getLogger(__name__)


def _check_num_concepts(num_concepts, available):
    if not 0 <= num_concepts <= available:
        raise ValueError("requested %s concepts, only %i available" % (num_concepts, available))


def top_terms_in_top_concepts(v, num_concepts, num_terms, term_ids):
    """Get the `num_terms` most heavily weighted terms of each of the first `num_concepts` concepts.

    Parameters
    ----------
    v : numpy.ndarray
        Right singular vectors, `vocabulary_size x k`.
    num_concepts : int
        How many leading concepts to describe.
    num_terms : int
        How many terms to list per concept.
    term_ids : dict of (int, str)
        Row index of `v` -> term.

    Returns
    -------
    list of list of (str, float)
        For each concept (concept #0 first), up to `num_terms` pairs of (term, weight), highest weight first.
        Equal weights are listed by ascending term index.

    """
    _check_num_concepts(num_concepts, v.shape[1])
    top_terms = []
    for concept in range(num_concepts):
        weights = v[:, concept]
        top_terms.append([(term_ids[termid], float(weights[termid]))
                          for termid in matutils.argsort_desc(weights, num_terms)])
    return top_terms


def top_docs_in_top_concepts(u, num_concepts, num_docs, doc_ids):
    """Get the `num_docs` most heavily weighted documents of each of the first `num_concepts` concepts.

    Parameters
    ----------
    u : :class:`~conceptspace.distributed.RowMatrix`
        Left singular vectors, `num_documents x k`. Only a top-`num_docs` selection is done per partition;
        `u` is never collected.
    num_concepts : int
        How many leading concepts to describe.
    num_docs : int
        How many documents to list per concept.
    doc_ids : dict of (int, str)
        Row index of `u` -> document title.

    Returns
    -------
    list of list of (str, float)
        For each concept (concept #0 first), up to `num_docs` pairs of (title, weight), highest weight first.

    """
    _check_num_concepts(num_concepts, u.num_cols)
    top_docs = []
    for concept in range(num_concepts):
        top_docs.append([(doc_ids[docid], score) for score, docid in u.top(num_docs, column=concept)])
    return top_docs


def format_concept(items):
    """Render one concept's `(label, weight)` items as ``label(0.123), label(0.045), ...``."""
    return ', '.join('%s(%.3f)' % (label, weight) for label, weight in items)


def log_concepts(concepts, s=None, kind='terms'):
    """Log (at INFO level) the output of :func:`top_terms_in_top_concepts` or :func:`top_docs_in_top_concepts`.

    Parameters
    ----------
    concepts : list of list of (str, float)
        Per-concept items.
    s : numpy.ndarray, optional
        Singular values, logged next to each concept if given.
    kind : str, optional
        What the items are, for the log message.

    """
    for concept, items in enumerate(concepts):
        if s is not None:
            logger.info("concept #%i(%.3f) top %s: %s", concept, s[concept], kind, format_concept(items))
        else:
            logger.info("concept #%i top %s: %s", concept, kind, format_concept(items))
