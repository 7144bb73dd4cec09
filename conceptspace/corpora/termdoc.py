#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2012 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Assemble a TF-IDF weighted term-document matrix from tokenized documents.

The vocabulary is pruned to the `num_terms` terms that appear in the most documents. Each cell of the resulting
matrix (rows = documents, columns = terms) holds

.. math::

    w_{d,t} = \\frac{tf_{d,t}}{|d|} \\cdot \\ln \\frac{N}{df_t}

where :math:`tf_{d,t}` is the number of occurrences of term `t` in document `d`, :math:`|d|` is the number of
tokens in `d`, :math:`N` is the number of documents and :math:`df_t` the number of documents containing `t`.

"""

from collections import Counter
import logging
import math

import numpy as np
import scipy.sparse

from conceptspace import distributed

logger = logging.getLogger(__name__)


def df2idf(docfreq, totaldocs):
    """Compute the inverse document frequency :math:`\\ln \\frac{totaldocs}{docfreq}`."""
    return math.log(float(totaldocs) / docfreq)


def top_terms_by_docfreq(doc_freqs, num_terms):
    """Get the `num_terms` terms with the highest document frequency, most frequent first, ties by term."""
    ranked = sorted(doc_freqs.items(), key=lambda item: (-item[1], item[0]))
    return [term for term, _ in ranked[:num_terms]]


def document_vector(term_freqs, id_terms, idfs, dtype=np.float64):
    """Convert term counts of one document into a sparse TF-IDF row vector.

    Parameters
    ----------
    term_freqs : dict of (str, int)
        Number of occurrences of each token in the document.
    id_terms : dict of (str, int)
        Vocabulary: term -> column index. Terms outside the vocabulary are ignored.
    idfs : dict of (str, float)
        Inverse document frequency of each vocabulary term.

    Returns
    -------
    scipy.sparse.csr_matrix
        Row vector of shape `(1, len(id_terms))`.

    """
    doc_total_terms = sum(term_freqs.values())
    entries = sorted(
        (id_terms[term], 1.0 * freq / doc_total_terms * idfs[term])
        for term, freq in term_freqs.items() if term in id_terms
    )
    indices = [termid for termid, _ in entries]
    data = [weight for _, weight in entries]
    return scipy.sparse.csr_matrix(
        (np.asarray(data, dtype=dtype), np.asarray(indices, dtype=np.int32), [0, len(indices)]),
        shape=(1, len(id_terms)),
    )


def term_document_matrix(docs, num_terms, num_partitions=distributed.DEFAULT_NUM_PARTITIONS, processes=None):
    """Build the TF-IDF weighted term-document matrix and its id mappings.

    Parameters
    ----------
    docs : iterable of (str, list of str)
        Documents as `(title, tokens)`, for example a :class:`~conceptspace.corpora.textcorpus.LineCorpus`.
        Iterated only once.
    num_terms : int
        Maximum vocabulary size.
    num_partitions : int, optional
        Number of partitions of the resulting matrix.
    processes : int, optional
        Worker processes for the resulting matrix, see :class:`~conceptspace.distributed.RowMatrix`.

    Returns
    -------
    (:class:`~conceptspace.distributed.RowMatrix`, dict of (int, str), dict of (int, str), dict of (str, float))
        The matrix (one sparse row per document), `term_ids` (column index -> term), `doc_ids`
        (row index -> document title) and `idfs` (term -> inverse document frequency).

    Raises
    ------
    ValueError
        If `docs` is empty or `num_terms` is not positive.

    """
    if num_terms < 1:
        raise ValueError("num_terms must be positive, got %s" % num_terms)
    logger.info("collecting document frequencies")
    titles, doc_term_freqs = [], []
    doc_freqs = Counter()
    for title, tokens in docs:
        term_freqs = Counter(tokens)
        titles.append(title)
        doc_term_freqs.append(term_freqs)
        doc_freqs.update(term_freqs.keys())
    num_docs = len(titles)
    if not num_docs:
        raise ValueError("cannot build a term-document matrix from an empty corpus")
    logger.info("collected %i unique terms from %i documents", len(doc_freqs), num_docs)

    vocabulary = top_terms_by_docfreq(doc_freqs, num_terms)
    id_terms = {term: termid for termid, term in enumerate(vocabulary)}
    term_ids = {termid: term for term, termid in id_terms.items()}
    idfs = {term: df2idf(doc_freqs[term], num_docs) for term in vocabulary}
    logger.info("keeping %i terms out of %i", len(vocabulary), len(doc_freqs))

    rows = [document_vector(term_freqs, id_terms, idfs) for term_freqs in doc_term_freqs]
    del doc_term_freqs
    matrix = distributed.RowMatrix.from_rows(
        rows, num_cols=len(id_terms), num_partitions=num_partitions, processes=processes,
    )

    doc_ids = {}
    titles_iter = iter(titles)
    for partition in matrix.partitions:
        for row_id in partition.ids:
            doc_ids[int(row_id)] = next(titles_iter)
    logger.info("built %s", matrix)
    return matrix, term_ids, doc_ids, idfs
