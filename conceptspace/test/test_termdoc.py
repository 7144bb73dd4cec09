#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""
Automated tests for building the TF-IDF term-document matrix.
"""

import logging
import math
import unittest

import numpy as np
import scipy.sparse

from conceptspace.corpora import termdoc
from conceptspace.test.utils import common_docs, common_matrix, common_titles


class TestTermDocumentMatrix(unittest.TestCase):
    def setUp(self):
        self.matrix, self.term_ids, self.doc_ids, self.idfs = common_matrix(num_partitions=3)
        self.id_terms = {term: termid for termid, term in self.term_ids.items()}
        self.id_docs = {title: docid for docid, title in self.doc_ids.items()}

    def test_shape(self):
        self.assertEqual(self.matrix.shape, (9, 12))
        self.assertEqual(len(self.matrix.partitions), 3)
        self.assertTrue(all(scipy.sparse.issparse(partition.block) for partition in self.matrix.partitions))

    def test_vocabulary_order(self):
        # most common first, ties by term
        self.assertEqual(
            [self.term_ids[termid] for termid in range(6)],
            ['graph', 'system', 'trees', 'user', 'computer', 'eps'],
        )

    def test_idfs(self):
        self.assertAlmostEqual(self.idfs['user'], math.log(9.0 / 3))
        self.assertAlmostEqual(self.idfs['human'], math.log(9.0 / 2))
        self.assertEqual(set(self.idfs), set(self.term_ids.values()))

    def test_doc_ids(self):
        self.assertEqual(sorted(self.doc_ids.values()), sorted(common_titles))
        self.assertEqual(sorted(self.doc_ids), sorted(self.matrix.collect()[0]))

    def test_weights(self):
        # 'System and human system engineering testing of EPS': system x2, human, eps
        row = self.matrix.lookup(self.id_docs[common_titles[3]])
        self.assertAlmostEqual(row[self.id_terms['system']], 2.0 / 4 * math.log(9.0 / 3))
        self.assertAlmostEqual(row[self.id_terms['human']], 1.0 / 4 * math.log(9.0 / 2))
        self.assertAlmostEqual(row[self.id_terms['eps']], 1.0 / 4 * math.log(9.0 / 2))
        self.assertEqual(np.count_nonzero(row), 3)

    def test_pruned_vocabulary(self):
        matrix, term_ids, doc_ids, idfs = termdoc.term_document_matrix(common_docs, 1, num_partitions=2)
        self.assertEqual(term_ids, {0: 'graph'})
        self.assertEqual(matrix.num_cols, 1)
        ids, rows = matrix.collect()
        weights = dict(zip((doc_ids[row_id] for row_id in ids), rows[:, 0]))
        # out-of-vocabulary tokens still count towards the document length
        self.assertAlmostEqual(weights['Graph minors A survey'], 1.0 / 3 * math.log(9.0 / 3))
        self.assertEqual(weights['The generation of random binary unordered trees'], 0.0)

    def test_bad_input(self):
        self.assertRaises(ValueError, termdoc.term_document_matrix, [], 10)
        self.assertRaises(ValueError, termdoc.term_document_matrix, common_docs, 0)


class TestHelpers(unittest.TestCase):
    def test_df2idf(self):
        self.assertAlmostEqual(termdoc.df2idf(2, 8), math.log(4.0))
        self.assertEqual(termdoc.df2idf(5, 5), 0.0)

    def test_top_terms_by_docfreq(self):
        self.assertEqual(termdoc.top_terms_by_docfreq({'b': 2, 'a': 2, 'c': 5}, 2), ['c', 'a'])
        self.assertEqual(termdoc.top_terms_by_docfreq({'b': 2}, 10), ['b'])

    def test_document_vector(self):
        vec = termdoc.document_vector({'a': 2, 'b': 1, 'x': 1}, {'a': 0, 'b': 1}, {'a': 1.0, 'b': 2.0})
        self.assertEqual(vec.shape, (1, 2))
        self.assertTrue(np.allclose(vec.toarray(), [[0.5, 0.5]]))


if __name__ == '__main__':
    logging.basicConfig(format='%(asctime)s : %(levelname)s : %(message)s', level=logging.DEBUG)
    unittest.main()
