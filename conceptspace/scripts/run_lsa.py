#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2013 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""This script builds a latent semantic (concept) space from a tokenized text corpus and prints what it found.

The corpus is a text file with one document per line: the title, a TAB, then whitespace-separated tokens (see
:class:`~conceptspace.corpora.textcorpus.LineCorpus`). The script

#. samples the documents and builds a TF-IDF weighted term-document matrix over the most common terms,
#. computes its rank-`k` truncated SVD,
#. prints the singular values and, for each leading concept, its top terms and top documents,
#. answers any term, document or free-text queries given on the command line.

How to use
----------
.. sourcecode:: bash

    python -m conceptspace.scripts.run_lsa corpus.txt.gz -k 100 -n 50000 --sample 0.1
    python -m conceptspace.scripts.run_lsa corpus.txt -k 2 --sample 1 --term graph --query "user interface"

"""

import argparse
import logging
import os
import sys

from conceptspace import distributed
from conceptspace.corpora import LineCorpus
from conceptspace.models import ConceptSpace
from conceptspace.models.concepts import format_concept
from conceptspace.similarities import conceptsim
from conceptspace.utils import tokenize

logger = logging.getLogger(__name__)

DEFAULT_K = 100
DEFAULT_NUM_TERMS = 50000
DEFAULT_SAMPLE = 0.1
DEFAULT_CONCEPTS = 20
DEFAULT_ITEMS = 15


def run_lsa(corpus, k=DEFAULT_K, num_terms=DEFAULT_NUM_TERMS, sample=DEFAULT_SAMPLE,
            num_partitions=distributed.DEFAULT_NUM_PARTITIONS, processes=None,
            num_concepts=DEFAULT_CONCEPTS, num_items=DEFAULT_ITEMS, terms=(), docs=(), queries=()):
    """Build the concept space of `corpus`, print its leading concepts and the results of the given queries.

    Parameters
    ----------
    corpus : str
        Path to the corpus file.
    k : int, optional
        Number of concepts.
    num_terms : int, optional
        Vocabulary size.
    sample : float, optional
        Fraction of documents to use.
    num_partitions : int, optional
        Number of partitions of the term-document matrix.
    processes : int, optional
        Worker processes; None or 1 for serial processing.
    num_concepts : int, optional
        Number of leading concepts to print.
    num_items : int, optional
        Number of terms and documents to print per concept.
    terms : iterable of str, optional
        Terms to find similar terms and relevant documents for.
    docs : iterable of str, optional
        Document titles to find similar documents for.
    queries : iterable of str, optional
        Free-text queries to find relevant documents for.

    Returns
    -------
    :class:`~conceptspace.models.conceptspace.ConceptSpace`
        The concept space.

    """
    space = ConceptSpace.from_corpus(
        LineCorpus(corpus, sample=sample), k, num_terms, num_partitions=num_partitions, processes=processes,
    )
    logger.info("built %s", space)

    print("Singular values: %s" % ', '.join('%.3f' % value for value in space.s))
    num_concepts = min(num_concepts, space.num_concepts)
    for concept in space.top_terms_in_top_concepts(num_concepts, num_items):
        print("Concept terms: %s" % format_concept(concept))
    for concept in space.top_docs_in_top_concepts(num_concepts, num_items):
        print("Concept docs: %s" % format_concept(concept))

    for term in terms:
        if term not in space.id_terms:
            logger.warning("skipping term %r: not in vocabulary", term)
            continue
        print("Terms similar to %r: %s" % (term, conceptsim.format_id_weights(
            space.top_terms_for_term(term), space.term_ids)))
        print("Documents relevant to %r: %s" % (term, conceptsim.format_id_weights(
            space.top_docs_for_term(term), space.doc_ids)))

    for doc in docs:
        if doc not in space.id_docs:
            logger.warning("skipping document %r: not in corpus", doc)
            continue
        print("Documents similar to %r: %s" % (doc, conceptsim.format_id_weights(
            space.top_docs_for_doc(doc), space.doc_ids)))

    for query in queries:
        query_terms = space.known_terms(tokenize(query))
        if not query_terms:
            logger.warning("skipping query %r: none of its terms are in the vocabulary", query)
            continue
        print("Documents relevant to query %r: %s" % (query, conceptsim.format_id_weights(
            space.top_docs_for_query(query_terms), space.doc_ids)))

    return space


def main(argv=None):
    parser = argparse.ArgumentParser(formatter_class=argparse.RawDescriptionHelpFormatter, description=__doc__)
    parser.add_argument("corpus", help="Path to the corpus: one 'title<TAB>tokens' document per line")
    parser.add_argument("-k", type=int, default=DEFAULT_K, help="Number of concepts (default: %(default)s)")
    parser.add_argument(
        "-n", "--num-terms", type=int, default=DEFAULT_NUM_TERMS,
        help="Number of most common terms to keep (default: %(default)s)",
    )
    parser.add_argument(
        "--sample", type=float, default=DEFAULT_SAMPLE,
        help="Fraction of documents to use, 0 < SAMPLE <= 1 (default: %(default)s)",
    )
    parser.add_argument(
        "--partitions", type=int, default=distributed.DEFAULT_NUM_PARTITIONS,
        help="Number of partitions of the term-document matrix (default: %(default)s)",
    )
    parser.add_argument(
        "--processes", type=int, default=None,
        help="Number of worker processes for partition tasks (default: serial)",
    )
    parser.add_argument(
        "--concepts", type=int, default=DEFAULT_CONCEPTS,
        help="Number of leading concepts to print (default: %(default)s)",
    )
    parser.add_argument(
        "--items", type=int, default=DEFAULT_ITEMS,
        help="Number of terms and documents to print per concept (default: %(default)s)",
    )
    parser.add_argument("--term", action="append", default=[], help="Term to query; may be repeated")
    parser.add_argument("--doc", action="append", default=[], help="Document title to query; may be repeated")
    parser.add_argument("--query", action="append", default=[], help="Free-text query; may be repeated")
    args = parser.parse_args(argv)

    run_lsa(
        args.corpus, k=args.k, num_terms=args.num_terms, sample=args.sample,
        num_partitions=args.partitions, processes=args.processes,
        num_concepts=args.concepts, num_items=args.items,
        terms=args.term, docs=args.doc, queries=args.query,
    )
    return 0


if __name__ == '__main__':
    logging.basicConfig(format='%(asctime)s : %(levelname)s : %(message)s', level=logging.INFO)
    logger.info("running %s", ' '.join(sys.argv))
    status = main()
    logger.info("finished running %s", os.path.basename(sys.argv[0]))
    sys.exit(status)
