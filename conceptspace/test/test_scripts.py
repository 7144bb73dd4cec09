#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""
Automated tests for the command line driver.
"""

import contextlib
import io
import logging
import unittest

from testfixtures import log_capture

from conceptspace.scripts import run_lsa
from conceptspace.test.utils import datapath


class TestRunLsa(unittest.TestCase):
    def _run(self, *args):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = run_lsa.main([datapath('toy_corpus.txt'), '--sample', '1.0', '--partitions', '2'] + list(args))
        return status, out.getvalue().splitlines()

    def test_concepts(self):
        status, lines = self._run('-k', '2', '--concepts', '2', '--items', '3')
        self.assertEqual(status, 0)
        self.assertTrue(lines[0].startswith("Singular values: "))
        self.assertEqual(len(lines[0][len("Singular values: "):].split(', ')), 2)
        self.assertEqual(len([line for line in lines if line.startswith("Concept terms: ")]), 2)
        self.assertEqual(len([line for line in lines if line.startswith("Concept docs: ")]), 2)

    @log_capture()
    def test_queries(self, loglines):
        status, lines = self._run(
            '-k', '2', '--term', 'graph', '--term', 'nonexistent', '--doc', 'Graph minors A survey',
            '--doc', 'No such document', '--query', 'Graph minors banana', '--query', 'banana',
        )
        self.assertEqual(status, 0)
        output = '\n'.join(lines)
        self.assertIn("Terms similar to 'graph': graph (1.000)", output)
        self.assertIn("Documents relevant to 'graph': ", output)
        self.assertIn("Documents similar to 'Graph minors A survey': ", output)
        self.assertIn("Documents relevant to query 'Graph minors banana': ", output)
        self.assertNotIn("'nonexistent'", output)
        self.assertNotIn("query 'banana'", output)
        self.assertTrue("skipping term 'nonexistent'" in str(loglines))
        self.assertTrue("skipping document 'No such document'" in str(loglines))
        self.assertTrue("ignoring query term 'banana'" in str(loglines))
        self.assertTrue("skipping query 'banana'" in str(loglines))

    def test_run_lsa(self):
        with contextlib.redirect_stdout(io.StringIO()):
            space = run_lsa.run_lsa(datapath('toy_corpus.txt'), k=3, sample=1.0, num_partitions=3, num_concepts=1)
        self.assertEqual(space.num_concepts, 3)
        # the single-token document is skipped by the reader
        self.assertEqual(len(space.u), 8)


if __name__ == '__main__':
    logging.basicConfig(format='%(asctime)s : %(levelname)s : %(message)s', level=logging.DEBUG)
    unittest.main()
