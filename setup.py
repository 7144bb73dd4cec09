#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2014 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - https://www.gnu.org/licenses/old-licenses/lgpl-2.1.en.html

"""
Run with::

    python ./setup.py install
"""

from setuptools import find_packages, setup

# packages included for build-testing everywhere
core_testenv = [
    'pytest',
    'pytest-cov',
    'testfixtures',
]

install_requires = [
    'numpy >= 1.18.5',
    'scipy >= 1.7.0',
    'smart_open >= 1.8.1',
]

setup(
    name='conceptspace',
    version='0.1.0.dev0',
    description='Latent semantic analysis over row-partitioned term-document matrices',
    long_description=(
        'Builds a TF-IDF term-document matrix from a tokenized corpus, computes its truncated SVD '
        'partition by partition and answers term and document similarity queries in the resulting concept space.'
    ),
    packages=find_packages(include=['conceptspace', 'conceptspace.*']),

    license='LGPL-2.1-only',

    keywords='Singular Value Decomposition, SVD, Latent Semantic Analysis, LSA, LSI, TFIDF, concept search',

    platforms='any',

    zip_safe=False,

    classifiers=[  # from https://pypi.org/classifiers/
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'Topic :: Text Processing :: Linguistic',
    ],

    python_requires='>=3.8',
    install_requires=install_requires,
    extras_require={
        'test': core_testenv,
    },

    package_data={
        'conceptspace.test': ['test_data/*'],
    },
    include_package_data=True,
)
