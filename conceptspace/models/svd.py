#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2010 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Truncated Singular Value Decomposition (SVD) of a row-partitioned matrix.

For a matrix `A` with many rows (documents) and a moderate number of columns (terms), the right singular vectors
`V` and singular values `S` are the eigenvectors and square roots of the eigenvalues of the Gramian `A^T * A`,
which is only `num_cols x num_cols`. The left singular vectors then follow row by row, as
`U = A * V * S^-1`, so that `U` stays partitioned exactly like `A` and is never collected into a single process.

Two ways of getting at the eigenvectors of the Gramian are supported:

* ``mode='local'``: compute the dense Gramian (summed over partitions) and decompose it with LAPACK.
  Fast for a small number of columns.
* ``mode='arpack'``: never form the Gramian; let ARPACK iterate on the operator `x -> A^T * (A * x)`, each
  application being one pass over all partitions. Needed when `num_cols x num_cols` floats would not fit in RAM.

Examples
--------
.. sourcecode:: pycon

    >>> import numpy
    >>> from conceptspace.distributed import RowMatrix
    >>> from conceptspace.models.svd import compute_svd
    >>>
    >>> mat = RowMatrix.from_rows(numpy.random.rand(20, 6), num_partitions=3)
    >>> svd = compute_svd(mat, 2)
    >>> svd.u.shape, svd.s.shape, svd.v.shape
    ((20, 2), (2,), (6, 2))

"""

from collections import namedtuple
import logging

import numpy as np
import scipy.linalg
import scipy.sparse.linalg

from conceptspace import utils

logger = logging.getLogger(__name__)

# singular values smaller than DEFAULT_R_COND * (largest singular value) are treated as zero
DEFAULT_R_COND = 1e-9

# below this many columns, mode='auto' always decomposes the Gramian locally
LOCAL_MAX_COLS = 100

# ARPACK convergence tolerance and minimum iteration budget
ARPACK_TOL = 1e-10
ARPACK_MAX_ITERS = 300

SingularValueDecomposition = namedtuple('SingularValueDecomposition', ['u', 's', 'v'])


def choose_mode(num_cols, k):
    """Decide how to compute the eigenvectors of the Gramian for a matrix of `num_cols` columns and rank `k`."""
    if num_cols < LOCAL_MAX_COLS or k > num_cols / 2.0:
        return 'local'
    return 'arpack'


def local_eigs(matrix, k):
    """Top `k` eigenvalues and eigenvectors of the explicitly computed Gramian of `matrix`."""
    gramian = matrix.gramian()
    logger.info("running dense eigendecomposition of %s Gramian", str(gramian.shape))
    eigvals, eigvecs = scipy.linalg.eigh(gramian)
    # eigh returns ascending order
    return eigvals[::-1][:k], eigvecs[:, ::-1][:, :k]


def arpack_eigs(matrix, k, seed=None, tol=ARPACK_TOL, maxiter=ARPACK_MAX_ITERS):
    """Top `k` eigenvalues and eigenvectors of the Gramian of `matrix`, without forming the Gramian."""
    n = matrix.num_cols
    if k >= n:
        raise ValueError("ARPACK needs k < num_cols, got k=%i for %i columns; use mode='local'" % (k, n))
    operator = scipy.sparse.linalg.LinearOperator((n, n), matvec=matrix.gramian_multiply, dtype=np.float64)
    v0 = utils.get_random_state(seed).uniform(-1.0, 1.0, n)
    logger.info("running ARPACK on implicit %i x %i Gramian, k=%i", n, n, k)
    eigvals, eigvecs = scipy.sparse.linalg.eigsh(
        operator, k=k, which='LM', tol=tol, maxiter=max(maxiter, 3 * k), v0=v0,
    )
    order = np.argsort(eigvals)[::-1]
    return eigvals[order], eigvecs[:, order]


def clip_spectrum(s, k, r_cond=DEFAULT_R_COND):
    """Find how many of the singular values `s` (sorted descending) are numerically non-zero, at most `k`."""
    if not len(s) or s[0] <= 0.0:
        return 0
    keep = int(np.sum(s >= r_cond * s[0]))
    keep = min(k, keep)
    if keep < k:
        logger.warning(
            "requested %i singular values but only found %i nonzeros (rank of input smaller than requested)", k, keep
        )
    return keep


def fix_signs(v):
    """Flip each column of `v` in place so that its largest-magnitude component is positive."""
    if v.shape[0] > 0:
        for i in range(v.shape[1]):
            largest = np.argmax(np.abs(v[:, i]))
            if v[largest, i] < 0.0:
                v[:, i] *= -1.0
    return v


def compute_svd(matrix, k, compute_u=True, r_cond=DEFAULT_R_COND, mode='auto', seed=None):
    """Compute the rank-`k` truncated SVD `A ~ U * diag(S) * V^T` of a row-partitioned matrix.

    Parameters
    ----------
    matrix : :class:`~conceptspace.distributed.RowMatrix`
        Input matrix `A`, `num_rows x num_cols` (documents x terms).
    k : int
        Desired rank, `1 <= k <= num_cols`.
    compute_u : bool, optional
        Whether to compute the left singular vectors as well.
    r_cond : float, optional
        Singular values below `r_cond * S[0]` are dropped, so fewer than `k` factors may be returned.
    mode : {'auto', 'local', 'arpack'}, optional
        How to decompose the Gramian, see module docstring.
    seed : {None, int, numpy.random.RandomState}, optional
        Seed for the ARPACK starting vector.

    Returns
    -------
    :class:`~conceptspace.models.svd.SingularValueDecomposition`
        `u` (:class:`~conceptspace.distributed.RowMatrix`, `num_rows x k'`, with the row indices of `matrix`,
        or None if `compute_u` is False), `s` (1D array of `k'` singular values, descending) and `v`
        (`num_cols x k'` dense array), where `k' <= k`.

    Raises
    ------
    ValueError
        If `k` is out of range, `mode` is unknown, or `matrix` is all zeros.

    """
    n = matrix.num_cols
    if not 1 <= k <= n:
        raise ValueError("requested rank k=%s out of range (must be 1 <= k <= %i)" % (k, n))
    if mode == 'auto':
        mode = choose_mode(n, k)
    logger.info("computing rank-%i SVD of %s in %s mode", k, matrix, mode)
    if mode == 'local':
        eigvals, eigvecs = local_eigs(matrix, k)
    elif mode == 'arpack':
        eigvals, eigvecs = arpack_eigs(matrix, k, seed=seed)
    else:
        raise ValueError("unknown SVD mode %r (expected 'auto', 'local' or 'arpack')" % mode)

    # go back from eigenvalues of A^T * A to singular values of A
    s = np.sqrt(np.clip(eigvals, 0.0, None))
    keep = clip_spectrum(s, k, r_cond=r_cond)
    if not keep:
        raise ValueError("cannot decompose %s: all singular values are zero" % matrix)
    s = s[:keep].copy()
    v = fix_signs(np.array(eigvecs[:, :keep], dtype=np.float64))
    logger.info("singular values: %s", s)

    u = None
    if compute_u:
        logger.info("computing left singular vectors")
        u = matrix.multiply(v * (1.0 / s)[np.newaxis, :])
    return SingularValueDecomposition(u, s, v)
