#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2011 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Math helper functions for small, fully materialized (local) matrices.

Their counterparts for large row-partitioned matrices live in :mod:`conceptspace.distributed`.

"""

import logging

import numpy as np
import scipy.sparse


logger = logging.getLogger(__name__)


def check_index(index, size, name='index'):
    """Make sure `index` is a valid position in a collection of `size` items.

    Raises
    ------
    ValueError
        If `index` is not an integer in `[0, size)`.

    """
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise ValueError("%s must be an integer, got %r" % (name, index))
    if not 0 <= index < size:
        raise ValueError("%s %s out of range (must be 0 <= x < %s)" % (name, index, size))
    return int(index)


def check_diagonal(diag, num_cols):
    """Get `diag` as a 1D float array, verifying it matches a matrix with `num_cols` columns.

    Raises
    ------
    ValueError
        If the diagonal length differs from `num_cols`.

    """
    diag = np.asarray(diag, dtype=np.float64).ravel()
    if diag.shape[0] != num_cols:
        raise ValueError(
            "dimension mismatch: diagonal has %i entries, matrix has %i columns" % (diag.shape[0], num_cols)
        )
    return diag


def argsort_desc(x, topn=None, tiebreak=None):
    """Get indices of the `topn` greatest elements of `x`, greatest first.

    Parameters
    ----------
    x : array_like
        1D array of scores.
    topn : int, optional
        Number of indices to return. If not given, all non-NaN indices are returned.
    tiebreak : array_like, optional
        1D array of the same length as `x`; equal scores are ordered by ascending `tiebreak` value.
        Defaults to the position in `x`.

    Returns
    -------
    numpy.ndarray
        Indices into `x`. NaN scores are never returned.

    """
    x = np.asarray(x, dtype=np.float64).ravel()
    index = np.flatnonzero(~np.isnan(x))
    values = x[index]
    if topn is None:
        topn = values.size
    if topn <= 0 or not values.size:
        return np.array([], dtype=np.int64)
    if topn < values.size:
        # partial sort: keep everything at least as large as the topn-th value (ties included), then sort only those
        threshold = np.partition(values, values.size - topn)[values.size - topn]
        keep = values >= threshold
        index, values = index[keep], values[keep]
    secondary = index if tiebreak is None else np.asarray(tiebreak).ravel()[index]
    order = np.lexsort((secondary, -values))
    return index[order[:topn]]


def top_scores(scores, topn=None):
    """Rank a dense vector of scores, returning `topn` pairs of (score, position), best first."""
    scores = np.asarray(scores, dtype=np.float64).ravel()
    return [(float(scores[pos]), int(pos)) for pos in argsort_desc(scores, topn)]


def row(mat, index):
    """Select a row from a local matrix, as a 1D array.

    Raises
    ------
    ValueError
        If `index` is not a valid row position.

    """
    index = check_index(index, mat.shape[0], name='row')
    if scipy.sparse.issparse(mat):
        return mat.getrow(index).toarray().ravel()
    return np.array(mat[index, :], dtype=np.float64).ravel()


def as_column(vec):
    """Get a 1D vector as a single-column 2D array."""
    return np.asarray(vec, dtype=np.float64).reshape(-1, 1)


def scale_by_diagonal(mat, diag):
    """Multiply a local matrix by a diagonal matrix represented by a vector, i.e. `mat * diag(diag)`.

    Parameters
    ----------
    mat : {numpy.ndarray, scipy.sparse}
        Input 2D matrix, `rows x k`. Not modified.
    diag : array_like
        The `k` diagonal entries.

    Returns
    -------
    numpy.ndarray
        New dense matrix with `result[i, j] == mat[i, j] * diag[j]`.

    Raises
    ------
    ValueError
        If `len(diag)` differs from the number of columns of `mat`.

    """
    diag = check_diagonal(diag, mat.shape[1])
    if scipy.sparse.issparse(mat):
        mat = mat.toarray()
    return np.asarray(mat, dtype=np.float64) * diag[np.newaxis, :]


def normalize_rows(mat):
    """Divide each row of a local matrix by its Euclidean length.

    Parameters
    ----------
    mat : {numpy.ndarray, scipy.sparse}
        Input 2D matrix. Not modified.

    Returns
    -------
    numpy.ndarray
        New dense matrix with unit-length rows.

    Notes
    -----
    A row of all zeros has no direction: it comes out as a row of NaN. Consumers must filter NaN scores out.

    """
    if scipy.sparse.issparse(mat):
        mat = mat.toarray()
    mat = np.asarray(mat, dtype=np.float64)
    lengths = np.sqrt(np.sum(mat * mat, axis=1))
    with np.errstate(divide='ignore', invalid='ignore'):
        return mat / lengths[:, np.newaxis]
