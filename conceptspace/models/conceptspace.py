#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2010 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Module for `Latent Semantic Analysis <https://en.wikipedia.org/wiki/Latent_semantic_analysis>`_ queries
addressed by term and document labels rather than row indices.

:class:`~conceptspace.models.conceptspace.ConceptSpace` keeps a rank-`k` decomposition `A ~ U * diag(S) * V^T`
together with the vocabulary and document titles, and answers the queries of
:mod:`conceptspace.similarities.conceptsim` on it. The derived matrices those queries need (`U * diag(S)`,
`V * diag(S)` and their row-normalized versions) are computed on first use and then kept.

Examples
--------
.. sourcecode:: pycon

    >>> from conceptspace.models import ConceptSpace
    >>> from conceptspace.test.utils import common_docs
    >>>
    >>> space = ConceptSpace.from_corpus(common_docs, k=2, num_terms=20)
    >>> sims = space.labels_for_terms(space.top_terms_for_term('graph'))  # [(term, cosine similarity), ...]
    >>> docs = space.labels_for_docs(space.top_docs_for_query(['human', 'interface']))

"""

import logging

from conceptspace import distributed, matutils, utils
from conceptspace.corpora import termdoc
from conceptspace.models import concepts, svd
from conceptspace.similarities import conceptsim

logger = logging.getLogger(__name__)


class ConceptSpace(object):
    """Term and document similarity queries on a truncated SVD of a term-document matrix.

    Attributes
    ----------
    u : :class:`~conceptspace.distributed.RowMatrix`
        Left singular vectors, documents x concepts.
    s : numpy.ndarray
        Singular values, descending.
    v : numpy.ndarray
        Right singular vectors, terms x concepts.
    term_ids, id_terms : dict
        Column index -> term and its inverse.
    doc_ids, id_docs : dict
        Row index -> document title and its inverse. If two documents share a title, `id_docs` keeps one of them.
    idfs : dict of (str, float) or None
        Inverse document frequencies, needed for free-text queries.

    """
    def __init__(self, u, s, v, term_ids, doc_ids, idfs=None):
        """

        Parameters
        ----------
        u : :class:`~conceptspace.distributed.RowMatrix`
            Left singular vectors.
        s : numpy.ndarray
            Singular values.
        v : numpy.ndarray
            Right singular vectors.
        term_ids : dict of (int, str)
            Row index of `v` -> term.
        doc_ids : dict of (int, str)
            Row index of `u` -> document title.
        idfs : dict of (str, float), optional
            Term -> inverse document frequency.

        Raises
        ------
        ValueError
            If the shapes of `u`, `s`, `v` and `term_ids` do not agree.

        """
        if u is None:
            raise ValueError("left singular vectors are required; compute the SVD with compute_u=True")
        s = matutils.check_diagonal(s, v.shape[1])
        if u.num_cols != len(s):
            raise ValueError("dimension mismatch: U has %i columns, S has %i values" % (u.num_cols, len(s)))
        if term_ids and max(term_ids) >= v.shape[0]:
            raise ValueError("term index %i out of range for V with %i rows" % (max(term_ids), v.shape[0]))
        self.u = u
        self.s = s
        self.v = v
        self.term_ids = term_ids
        self.id_terms = utils.revdict(term_ids)
        self.doc_ids = doc_ids
        self.id_docs = utils.revdict(doc_ids)
        self.idfs = idfs
        self._us = None
        self._vs = None
        self._normalized_us = None
        self._normalized_vs = None

    @classmethod
    def from_corpus(cls, docs, k, num_terms, num_partitions=distributed.DEFAULT_NUM_PARTITIONS, processes=None,
                    r_cond=svd.DEFAULT_R_COND, mode='auto', seed=None):
        """Build the term-document matrix of `docs`, decompose it and wrap the result.

        Parameters
        ----------
        docs : iterable of (str, list of str)
            Documents as `(title, tokens)`, e.g. a :class:`~conceptspace.corpora.textcorpus.LineCorpus`.
        k : int
            Number of concepts. Capped at the vocabulary size.
        num_terms : int
            Maximum vocabulary size.
        num_partitions, processes
            Partitioning of the term-document matrix, see :class:`~conceptspace.distributed.RowMatrix`.
        r_cond, mode, seed
            See :func:`~conceptspace.models.svd.compute_svd`.

        Returns
        -------
        :class:`~conceptspace.models.conceptspace.ConceptSpace`

        """
        matrix, term_ids, doc_ids, idfs = termdoc.term_document_matrix(
            docs, num_terms, num_partitions=num_partitions, processes=processes,
        )
        if k > matrix.num_cols:
            logger.warning("requested %i concepts but the vocabulary has only %i terms", k, matrix.num_cols)
            k = matrix.num_cols
        u, s, v = svd.compute_svd(matrix, k, r_cond=r_cond, mode=mode, seed=seed)
        return cls(u, s, v, term_ids, doc_ids, idfs=idfs)

    def __str__(self):
        return "ConceptSpace(num_terms=%s, num_docs=%s, num_concepts=%s)" % (
            len(self.term_ids), len(self.u), len(self.s),
        )

    @property
    def num_concepts(self):
        return len(self.s)

    @property
    def us(self):
        """`U * diag(S)`, a :class:`~conceptspace.distributed.RowMatrix`."""
        if self._us is None:
            self._us = distributed.scale_by_diagonal(self.u, self.s)
        return self._us

    @property
    def vs(self):
        """`V * diag(S)`, a dense array."""
        if self._vs is None:
            self._vs = matutils.scale_by_diagonal(self.v, self.s)
        return self._vs

    @property
    def normalized_us(self):
        if self._normalized_us is None:
            self._normalized_us = distributed.normalize_rows(self.us)
        return self._normalized_us

    @property
    def normalized_vs(self):
        if self._normalized_vs is None:
            self._normalized_vs = matutils.normalize_rows(self.vs)
        return self._normalized_vs

    def top_terms_in_top_concepts(self, num_concepts, num_terms):
        """See :func:`~conceptspace.models.concepts.top_terms_in_top_concepts`."""
        return concepts.top_terms_in_top_concepts(self.v, num_concepts, num_terms, self.term_ids)

    def top_docs_in_top_concepts(self, num_concepts, num_docs):
        """See :func:`~conceptspace.models.concepts.top_docs_in_top_concepts`."""
        return concepts.top_docs_in_top_concepts(self.u, num_concepts, num_docs, self.doc_ids)

    def print_concepts(self, num_concepts=10, num_items=10):
        """Log the top terms and top documents of the `num_concepts` leading concepts."""
        num_concepts = min(num_concepts, self.num_concepts)
        concepts.log_concepts(self.top_terms_in_top_concepts(num_concepts, num_items), s=self.s, kind='terms')
        concepts.log_concepts(self.top_docs_in_top_concepts(num_concepts, num_items), s=self.s, kind='docs')

    def top_terms_for_term(self, term, topn=conceptsim.DEFAULT_TOPN):
        """Get `(cosine similarity, term index)` of the terms closest to `term`.

        Raises
        ------
        KeyError
            If `term` is not in the vocabulary.

        """
        return conceptsim.top_terms_for_term(self.normalized_vs, self.id_terms[term], topn)

    def top_docs_for_doc(self, doc, topn=conceptsim.DEFAULT_TOPN):
        """Get `(cosine similarity, row index)` of the documents closest to the document titled `doc`.

        Raises
        ------
        KeyError
            If no document has this title.

        """
        return conceptsim.top_docs_for_doc(self.normalized_us, self.id_docs[doc], topn)

    def top_docs_for_term(self, term, topn=conceptsim.DEFAULT_TOPN):
        """Get `(relevance, row index)` of the documents most relevant to `term`.

        Raises
        ------
        KeyError
            If `term` is not in the vocabulary.

        """
        return conceptsim.top_docs_for_term(self.us, self.v, self.id_terms[term], topn)

    def known_terms(self, terms):
        """Filter `terms` down to those in the vocabulary, logging a warning for each one dropped."""
        known = []
        for term in terms:
            if term in self.id_terms:
                known.append(term)
            else:
                logger.warning("ignoring query term %r: not in vocabulary", term)
        return known

    def query_vector(self, terms):
        """Build the IDF-weighted query vector of `terms`.

        See :func:`~conceptspace.similarities.conceptsim.terms_to_query_vector`.

        Raises
        ------
        ValueError
            If this space was built without IDF weights.
        KeyError
            If any of `terms` is unknown.

        """
        if self.idfs is None:
            raise ValueError("free-text queries need idfs, none were given")
        return conceptsim.terms_to_query_vector(terms, self.id_terms, self.idfs)

    def top_docs_for_query(self, terms, topn=conceptsim.DEFAULT_TOPN):
        """Get `(relevance, row index)` of the documents most relevant to the free-text query `terms`."""
        return conceptsim.top_docs_for_term_query(self.us, self.v, self.query_vector(terms), topn)

    def labels_for_terms(self, id_weights):
        """Convert `[(score, term index)]` to `[(term, score)]`."""
        return conceptsim.id_weights_to_labels(id_weights, self.term_ids)

    def labels_for_docs(self, id_weights):
        """Convert `[(score, row index)]` to `[(title, score)]`."""
        return conceptsim.id_weights_to_labels(id_weights, self.doc_ids)
