#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2013 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Similarity queries in a concept space obtained from the SVD `A ~ U * diag(S) * V^T` of a term-document matrix.

Terms live in the rows of `V` (small, kept in memory), documents in the rows of `U` (possibly huge, kept as a
:class:`~conceptspace.distributed.RowMatrix`). With `US = U * diag(S)` and `VS = V * diag(S)`:

============================  ==============================================  ======================
query                         scores                                          function
============================  ==============================================  ======================
term -> similar terms         rows of normalized `VS` . normalized `VS[t]`    :func:`top_terms_for_term`
document -> similar docs      rows of normalized `US` . normalized `US[d]`    :func:`top_docs_for_doc`
term -> relevant documents    rows of `US` . `V[t]`                           :func:`top_docs_for_term`
free text -> relevant docs    rows of `US` . (`q^T * V`)                      :func:`top_docs_for_term_query`
============================  ==============================================  ======================

Term-to-term and document-to-document scores are cosine similarities (both sides unit length). Term-to-document
scores are not normalized: they reflect the absolute loading of documents on the term's concepts.

All queries return a list of `(score, id)` pairs, highest score first, equal scores by ascending id. NaN scores
(from rows of all zeros, which have no direction once normalized) are never returned.

Examples
--------
.. sourcecode:: pycon

    >>> from conceptspace import matutils
    >>> from conceptspace.models.svd import compute_svd
    >>> from conceptspace.similarities import conceptsim
    >>> from conceptspace.test.utils import common_matrix
    >>>
    >>> matrix, term_ids, doc_ids, idfs = common_matrix()
    >>> u, s, v = compute_svd(matrix, 2)
    >>> normalized_vs = matutils.normalize_rows(matutils.scale_by_diagonal(v, s))
    >>> sims = conceptsim.top_terms_for_term(normalized_vs, 0)  # terms most similar to term #0

"""

import logging

import numpy as np
import scipy.sparse

from conceptspace import matutils

logger = logging.getLogger(__name__)

DEFAULT_TOPN = 10


def terms_to_query_vector(terms, id_terms, idfs):
    """Build a sparse query vector over the vocabulary, weighting each query term by its IDF.

    Parameters
    ----------
    terms : iterable of str
        Query terms. All of them must be in the vocabulary; filter unknown terms out beforehand.
    id_terms : dict of (str, int)
        Term -> column index. Its size determines the vector length.
    idfs : dict of (str, float)
        Term -> inverse document frequency.

    Returns
    -------
    scipy.sparse.csr_matrix
        Row vector of shape `(1, len(id_terms))`. A term given more than once contributes its weight once per
        occurrence.

    Raises
    ------
    KeyError
        If a term is missing from `id_terms` or `idfs`.

    """
    indices, values = [], []
    for term in terms:
        if term not in id_terms:
            raise KeyError("query term %r not in vocabulary" % term)
        if term not in idfs:
            raise KeyError("query term %r has no idf weight" % term)
        indices.append(id_terms[term])
        values.append(idfs[term])
    rows = np.zeros(len(indices), dtype=np.int32)
    result = scipy.sparse.csr_matrix(
        (np.asarray(values, dtype=np.float64), (rows, np.asarray(indices, dtype=np.int32))),
        shape=(1, len(id_terms)),
    )
    result.sum_duplicates()
    return result


def top_terms_for_term(normalized_vs, term_id, topn=DEFAULT_TOPN):
    """Find the terms most similar to a term. Local computation only.

    Parameters
    ----------
    normalized_vs : numpy.ndarray
        `V * diag(S)` with rows normalized to unit length, `vocabulary_size x k`.
    term_id : int
        Index of the query term.
    topn : int, optional
        Number of results.

    Returns
    -------
    list of (float, int)
        (cosine similarity, term index) pairs. The query term itself normally comes first, with score 1.0.

    Raises
    ------
    ValueError
        If `term_id` is out of range.

    """
    term_row = matutils.row(normalized_vs, term_id)
    scores = np.dot(normalized_vs, term_row)
    return matutils.top_scores(scores, topn)


def top_docs_for_doc(normalized_us, doc_id, topn=DEFAULT_TOPN):
    """Find the documents most similar to a document.

    Parameters
    ----------
    normalized_us : :class:`~conceptspace.distributed.RowMatrix`
        `U * diag(S)` with rows normalized to unit length.
    doc_id : int
        Row index of the query document.
    topn : int, optional
        Number of results.

    Returns
    -------
    list of (float, int)
        (cosine similarity, row index) pairs. Documents whose row in `U` is all zeros never appear.

    Raises
    ------
    ValueError
        If no row of `normalized_us` has index `doc_id`.

    """
    # no index structure: finding the row scans all partitions
    doc_row = normalized_us.lookup(doc_id)
    scores = normalized_us.multiply(matutils.as_column(doc_row))
    return scores.top(topn)


def top_docs_for_term(us, v, term_id, topn=DEFAULT_TOPN):
    """Find the documents most relevant to a term.

    Parameters
    ----------
    us : :class:`~conceptspace.distributed.RowMatrix`
        `U * diag(S)`, not normalized.
    v : numpy.ndarray
        Right singular vectors, `vocabulary_size x k`.
    term_id : int
        Index of the query term.
    topn : int, optional
        Number of results.

    Returns
    -------
    list of (float, int)
        (relevance, row index) pairs.

    Raises
    ------
    ValueError
        If `term_id` is out of range.

    """
    term_row = matutils.row(v, term_id)
    return concept_weights_to_top_docs(us, term_row, topn)


def project_query(v, query):
    """Project a sparse query vector over the vocabulary into concept space: `query * V`, a vector of length `k`.

    Raises
    ------
    ValueError
        If the query length differs from the number of rows of `v`.

    """
    if not scipy.sparse.issparse(query):
        query = scipy.sparse.csr_matrix(np.asarray(query, dtype=np.float64).reshape(1, -1))
    query = query.tocsr()
    if query.shape[1] != v.shape[0]:
        raise ValueError("dimension mismatch: query over %i terms, V has %i rows" % (query.shape[1], v.shape[0]))
    return np.asarray(query.dot(v), dtype=np.float64).ravel()


def top_docs_for_term_query(us, v, query, topn=DEFAULT_TOPN):
    """Find the documents most relevant to a free-text query.

    Parameters
    ----------
    us : :class:`~conceptspace.distributed.RowMatrix`
        `U * diag(S)`, not normalized.
    v : numpy.ndarray
        Right singular vectors, `vocabulary_size x k`.
    query : scipy.sparse.csr_matrix
        Query vector over the vocabulary, see :func:`terms_to_query_vector`.
    topn : int, optional
        Number of results.

    Returns
    -------
    list of (float, int)
        (relevance, row index) pairs.

    """
    concept_weights = project_query(v, query)
    return concept_weights_to_top_docs(us, concept_weights, topn)


def doc_concept_weights(u, doc_id):
    """Get the concept weights (row of `u`) of a document. Scans all partitions."""
    return u.lookup(doc_id)


def term_concept_weights(v, term_id):
    """Get the concept weights (row of `v`) of a term."""
    return matutils.row(v, term_id)


def _check_concept_weights(concept_weights, k):
    concept_weights = np.asarray(concept_weights, dtype=np.float64).ravel()
    if concept_weights.shape[0] != k:
        raise ValueError("dimension mismatch: %i concept weights for %i concepts" % (concept_weights.shape[0], k))
    return concept_weights


def concept_weights_to_top_terms(v, concept_weights, topn=DEFAULT_TOPN):
    """Rank terms by `V * concept_weights`.

    Returns
    -------
    list of (float, int)
        (score, term index) pairs.

    """
    concept_weights = _check_concept_weights(concept_weights, v.shape[1])
    return matutils.top_scores(np.dot(v, concept_weights), topn)


def concept_weights_to_top_docs(u, concept_weights, topn=DEFAULT_TOPN):
    """Rank documents by `U * concept_weights`, using a distributed top-`topn` selection.

    Parameters
    ----------
    u : :class:`~conceptspace.distributed.RowMatrix`
        Any documents x concepts matrix (`U`, `US`, ...).
    concept_weights : array_like
        Vector of `u.num_cols` weights.

    Returns
    -------
    list of (float, int)
        (score, row index) pairs.

    """
    concept_weights = _check_concept_weights(concept_weights, u.num_cols)
    scores = u.multiply(matutils.as_column(concept_weights))
    return scores.top(topn)


def _unscaled_term_weights(v, s, term_id):
    return term_concept_weights(v, term_id) / np.asarray(s, dtype=np.float64)


def terms_relevant_to_term(v, s, term_id, topn=DEFAULT_TOPN):
    """Rank terms by relevance to a term, using the term's row of `V` divided by the singular values."""
    return concept_weights_to_top_terms(v, _unscaled_term_weights(v, s, term_id), topn)


def docs_relevant_to_term(u, v, s, term_id, topn=DEFAULT_TOPN):
    """Rank documents by relevance to a term, using the term's row of `V` divided by the singular values."""
    return concept_weights_to_top_docs(u, _unscaled_term_weights(v, s, term_id), topn)


def terms_relevant_to_doc(u, v, doc_id, topn=DEFAULT_TOPN):
    """Rank terms by relevance to a document, using the document's row of `U` as concept weights."""
    return concept_weights_to_top_terms(v, doc_concept_weights(u, doc_id), topn)


def docs_relevant_to_doc(u, doc_id, topn=DEFAULT_TOPN):
    """Rank documents by relevance to a document, using the document's row of `U` as concept weights."""
    return concept_weights_to_top_docs(u, doc_concept_weights(u, doc_id), topn)


def id_weights_to_labels(id_weights, entity_ids):
    """Replace ids by their labels: `[(score, id)]` -> `[(label, score)]`."""
    return [(entity_ids[entity_id], score) for score, entity_id in id_weights]


def format_id_weights(id_weights, entity_ids):
    """Render `[(score, id)]` as a single line ``label (0.123), label (0.045), ...``."""
    return ', '.join('%s (%.3f)' % (label, score) for label, score in id_weights_to_labels(id_weights, entity_ids))


def print_id_weights(id_weights, entity_ids):
    print(format_id_weights(id_weights, entity_ids))


def print_top_terms_for_term(normalized_vs, term, id_terms, term_ids):
    print_id_weights(top_terms_for_term(normalized_vs, id_terms[term]), term_ids)


def print_top_docs_for_doc(normalized_us, doc, id_docs, doc_ids):
    print_id_weights(top_docs_for_doc(normalized_us, id_docs[doc]), doc_ids)


def print_top_docs_for_term(us, v, term, id_terms, doc_ids):
    print_id_weights(top_docs_for_term(us, v, id_terms[term]), doc_ids)
