#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2010 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""
Automated tests for the concept space session object.
"""

import logging
import unittest

import numpy as np
from testfixtures import log_capture

from conceptspace.models import ConceptSpace
from conceptspace.test.utils import common_docs, common_titles


class TestConceptSpace(unittest.TestCase):
    def setUp(self):
        self.space = ConceptSpace.from_corpus(common_docs, k=2, num_terms=100, num_partitions=3)

    def test_shapes(self):
        self.assertEqual(self.space.num_concepts, 2)
        self.assertEqual(self.space.v.shape, (12, 2))
        self.assertEqual(len(self.space.u), 9)
        self.assertEqual(self.space.id_terms['graph'], 0)
        self.assertEqual(str(self.space), "ConceptSpace(num_terms=12, num_docs=9, num_concepts=2)")

    def test_derived_matrices_cached(self):
        self.assertIs(self.space.us, self.space.us)
        self.assertIs(self.space.vs, self.space.vs)
        self.assertIs(self.space.normalized_us, self.space.normalized_us)
        self.assertIs(self.space.normalized_vs, self.space.normalized_vs)
        self.assertTrue(np.allclose(self.space.vs, self.space.v * self.space.s))
        self.assertTrue(np.allclose(np.linalg.norm(self.space.normalized_vs, axis=1), 1.0))

    def test_top_terms_for_term(self):
        labels = dict(self.space.labels_for_terms(self.space.top_terms_for_term('graph')))
        self.assertIn('graph', labels)
        self.assertAlmostEqual(labels['graph'], 1.0, places=6)
        self.assertTrue(len(labels) <= 10)
        self.assertRaises(KeyError, self.space.top_terms_for_term, 'nonexistent')

    def test_top_docs_for_doc(self):
        title = common_titles[7]
        result = self.space.top_docs_for_doc(title, topn=9)
        labels = dict(self.space.labels_for_docs(result))
        self.assertAlmostEqual(labels[title], 1.0, places=6)
        scores = [score for score, _ in result]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertRaises(KeyError, self.space.top_docs_for_doc, 'no such title')

    def test_top_docs_for_term(self):
        result = self.space.top_docs_for_term('trees', topn=3)
        self.assertEqual(len(result), 3)
        self.assertTrue(all(title in common_titles[5:] for title, _ in self.space.labels_for_docs(result)))

    def test_top_docs_for_query(self):
        result = self.space.labels_for_docs(self.space.top_docs_for_query(['graph', 'minors']))
        self.assertEqual(len(result), 9)
        self.assertIn(result[0][0], common_titles[5:])
        self.assertRaises(KeyError, self.space.top_docs_for_query, ['graph', 'nonexistent'])

    def test_query_vector(self):
        query = self.space.query_vector(['graph', 'graph'])
        self.assertEqual(query.shape, (1, 12))
        self.assertAlmostEqual(query[0, 0], 2 * self.space.idfs['graph'])

    @log_capture()
    def test_known_terms(self, loglines):
        self.assertEqual(self.space.known_terms(['graph', 'nonexistent', 'trees']), ['graph', 'trees'])
        self.assertTrue("ignoring query term 'nonexistent'" in str(loglines))

    def test_top_in_top_concepts(self):
        terms = self.space.top_terms_in_top_concepts(2, 3)
        docs = self.space.top_docs_in_top_concepts(2, 4)
        self.assertEqual([len(items) for items in terms], [3, 3])
        self.assertEqual([len(items) for items in docs], [4, 4])
        self.assertTrue(all(term in self.space.id_terms for items in terms for term, _ in items))
        self.assertTrue(all(title in common_titles for items in docs for title, _ in items))

    @log_capture()
    def test_print_concepts(self, loglines):
        self.space.print_concepts(num_concepts=5, num_items=2)
        self.assertTrue("concept #1" in str(loglines))
        self.assertFalse("concept #2" in str(loglines))

    @log_capture()
    def test_k_larger_than_vocabulary(self, loglines):
        space = ConceptSpace.from_corpus(common_docs, k=50, num_terms=5, num_partitions=2)
        self.assertTrue(space.num_concepts <= 5)
        self.assertTrue("requested 50 concepts but the vocabulary has only 5 terms" in str(loglines))


class TestValidation(unittest.TestCase):
    def setUp(self):
        space = ConceptSpace.from_corpus(common_docs, k=2, num_terms=100, num_partitions=3)
        self.u, self.s, self.v = space.u, space.s, space.v
        self.term_ids, self.doc_ids = space.term_ids, space.doc_ids

    def test_shape_mismatch(self):
        self.assertRaises(ValueError, ConceptSpace, self.u, self.s[:1], self.v, self.term_ids, self.doc_ids)
        self.assertRaises(ValueError, ConceptSpace, self.u, self.s, self.v[:5], self.term_ids, self.doc_ids)
        self.assertRaises(ValueError, ConceptSpace, None, self.s, self.v, self.term_ids, self.doc_ids)

    def test_query_without_idfs(self):
        space = ConceptSpace(self.u, self.s, self.v, self.term_ids, self.doc_ids)
        self.assertRaises(ValueError, space.query_vector, ['graph'])


if __name__ == '__main__':
    logging.basicConfig(format='%(asctime)s : %(levelname)s : %(message)s', level=logging.DEBUG)
    unittest.main()
