#!/usr/bin/env python
# encoding: utf-8

"""Module contains common utilities used in automated code tests for conceptspace modules.

Attributes:
-----------
module_path : str
    Full path to this module directory.

common_titles : list of str
    Titles of the toy documents.

common_texts : list of list of str
    Toy dataset.

common_docs : list of (str, list of str)
    Toy dataset as `(title, tokens)` pairs, the input format of
    :func:`~conceptspace.corpora.termdoc.term_document_matrix`.


Examples:
---------
Let's print the first document in the toy dataset.

>>> from conceptspace.test.utils import common_docs
>>> print(common_docs[0])
('Human machine interface for lab abc computer applications', ['human', 'interface', 'computer'])

We can find the same toy set, one document per line, in the test data directory.

>>> from conceptspace.corpora import LineCorpus
>>> from conceptspace.test.utils import datapath
>>>
>>> corpus = LineCorpus(datapath("toy_corpus.txt"))

"""

import contextlib
import os
import shutil
import tempfile

from conceptspace.corpora.termdoc import term_document_matrix

module_path = os.path.dirname(__file__)  # needed because sample data files are located in the same folder


def datapath(fname):
    """Get full path for file `fname` in test data directory placed in this module directory.

    Parameters
    ----------
    fname : str
        Name of file.

    Returns
    -------
    str
        Full path to `fname` in test_data folder.

    """
    return os.path.join(module_path, 'test_data', fname)


@contextlib.contextmanager
def temporary_file(name=""):
    """This context manager creates file `name` in temporary directory and returns its full path.
    Temporary directory with included files will deleted at the end of context. Note, it won't create file.

    Parameters
    ----------
    name : str
        Filename.

    Yields
    ------
    str
        Path to file `name` in temporary directory.

    """
    tmp = tempfile.mkdtemp()
    try:
        yield os.path.join(tmp, name)
    finally:
        shutil.rmtree(tmp, ignore_errors=True)


# set up vars used in testing ("Deerwester" from the web tutorial)
common_titles = [
    'Human machine interface for lab abc computer applications',
    'A survey of user opinion of computer system response time',
    'The EPS user interface management system',
    'System and human system engineering testing of EPS',
    'Relation of user perceived response time to error measurement',
    'The generation of random binary unordered trees',
    'The intersection graph of paths in trees',
    'Graph minors IV Widths of trees and well quasi ordering',
    'Graph minors A survey',
]

common_texts = [
    ['human', 'interface', 'computer'],
    ['survey', 'user', 'computer', 'system', 'response', 'time'],
    ['eps', 'user', 'interface', 'system'],
    ['system', 'human', 'system', 'eps'],
    ['user', 'response', 'time'],
    ['trees'],
    ['graph', 'trees'],
    ['graph', 'minors', 'trees'],
    ['graph', 'minors', 'survey']
]

common_docs = list(zip(common_titles, common_texts))


def common_matrix(num_partitions=3, num_terms=100):
    """Get the TF-IDF term-document matrix of the toy dataset, with its id mappings and idfs."""
    return term_document_matrix(common_docs, num_terms, num_partitions=num_partitions)
