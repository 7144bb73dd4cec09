#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2010 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Stream already-tokenized documents from a plain text file.

One line = one document: the document title, a TAB, then the document's tokens separated by whitespace::

    Human machine interface<TAB>human interface computer
    A survey of user opinion<TAB>survey user computer system response time

Cleaning the raw text (markup removal, lemmatization, stop words) happens before this point and is not part of
this package.

"""

import logging

from conceptspace import utils

logger = logging.getLogger(__name__)


class LineCorpus(object):
    """Iterate over `(title, tokens)` pairs stored one per line.

    Examples
    --------
    .. sourcecode:: pycon

        >>> from conceptspace.corpora import LineCorpus
        >>> from conceptspace.test.utils import datapath
        >>>
        >>> corpus = LineCorpus(datapath('toy_corpus.txt'))
        >>> for title, tokens in corpus:
        ...     pass

    """
    def __init__(self, source, min_tokens=2, sample=1.0, seed=11):
        """

        Parameters
        ----------
        source : str or file-like
            Path to the file (plain, .gz, .bz2, or any URI supported by `smart_open`), or an already-open
            text file object (must support `seek(0)`).
        min_tokens : int, optional
            Skip documents with fewer tokens than this.
        sample : float, optional
            Keep each document with this probability, `0 < sample <= 1`.
        seed : int, optional
            Seed for the sampling, so that repeated iterations yield the same documents.

        """
        if not 0.0 < sample <= 1.0:
            raise ValueError("sample must be in (0, 1], got %s" % sample)
        self.source = source
        self.min_tokens = min_tokens
        self.sample = sample
        self.seed = seed

    def __iter__(self):
        random_state = utils.get_random_state(self.seed)
        with utils.open_file(self.source) as fin:
            for lineno, line in enumerate(fin):
                if self.sample < 1.0 and random_state.random_sample() >= self.sample:
                    continue
                line = line.rstrip('\r\n')
                if '\t' not in line:
                    logger.debug("skipping line #%i: no title separator", lineno)
                    continue
                title, text = line.split('\t', 1)
                tokens = text.split()
                if len(tokens) < self.min_tokens:
                    logger.debug("skipping document %r: only %i tokens", title, len(tokens))
                    continue
                yield title, tokens

    def __str__(self):
        return "LineCorpus(%s, sample=%s)" % (self.source, self.sample)
