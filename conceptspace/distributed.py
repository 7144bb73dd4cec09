#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2013 Radim Rehurek <radimrehurek@seznam.cz>
# Licensed under the GNU LGPL v2.1 - http://www.gnu.org/licenses/lgpl.html

"""Row-partitioned matrices, for matrices with too many rows to handle as a single block.

The main class is :class:`~conceptspace.distributed.RowMatrix`. It splits the rows of a matrix into several
smaller blocks ("partitions"), each holding a contiguous run of rows together with a unique integer index for
every row. All operations are expressed as functions applied independently to each partition, followed (where
a single answer is needed) by a reduction over the per-partition results:

* row-wise transformations (:meth:`~conceptspace.distributed.RowMatrix.scale`,
  :meth:`~conceptspace.distributed.RowMatrix.normalize`, :meth:`~conceptspace.distributed.RowMatrix.multiply`)
  return a new :class:`~conceptspace.distributed.RowMatrix` with the same partitioning and row indices,
* aggregations (:meth:`~conceptspace.distributed.RowMatrix.top`, :meth:`~conceptspace.distributed.RowMatrix.lookup`,
  :meth:`~conceptspace.distributed.RowMatrix.gramian`) block until every partition has been processed.

Partitions are processed one after another by default. Set `processes` on the matrix (or the module-wide
:const:`PARALLEL_PARTITIONS`) to a number > 1 to process them in a :class:`multiprocessing.Pool` instead.

.. sourcecode:: pycon

    >>> import numpy
    >>> from conceptspace.distributed import RowMatrix
    >>>
    >>> mat = RowMatrix.from_rows(numpy.eye(5), num_partitions=2)  # row indices 0, 2, 4 and 1, 3
    >>> mat.top(2, column=3)  # two largest values in column #3, as (value, row index)
    [(1.0, 1), (0.0, 0)]

"""

import functools
import heapq
import itertools
import logging
import math
import multiprocessing

import numpy as np
import scipy.sparse

from conceptspace import matutils, utils


logger = logging.getLogger(__name__)

# by default, process partitions serially. set to the number of worker processes to parallelize.
PARALLEL_PARTITIONS = 1

DEFAULT_NUM_PARTITIONS = 4


class Partition(object):
    """A block of rows of a :class:`~conceptspace.distributed.RowMatrix`, plus the unique index of each row."""

    def __init__(self, ids, block):
        """

        Parameters
        ----------
        ids : array_like of int
            Unique row index for each row of `block`.
        block : {numpy.ndarray, scipy.sparse.csr_matrix}
            2D matrix with the rows of this partition.

        """
        self.ids = np.asarray(ids, dtype=np.int64).ravel()
        self.block = block
        if self.ids.shape[0] != block.shape[0]:
            raise ValueError("partition has %i row ids for %i rows" % (self.ids.shape[0], block.shape[0]))

    def __len__(self):
        return self.block.shape[0]

    def __str__(self):
        return "Partition(%i rows x %i columns, %s)" % (
            self.block.shape[0], self.block.shape[1], 'sparse' if scipy.sparse.issparse(self.block) else 'dense',
        )


def _run_task(args):
    """Apply a function to a single partition, turning any failure into a failure of the whole operation.

    Module-level, so that it can be sent to :class:`multiprocessing.Pool` workers.

    """
    func, partition_no, partition = args
    try:
        return func(partition)
    except Exception as err:
        logger.error("partition #%i failed: %s", partition_no, err)
        raise RuntimeError("partition #%i failed: %s" % (partition_no, err)) from err


def _func_name(func):
    return getattr(getattr(func, 'func', func), '__name__', repr(func))


def _scale_partition(partition, diag):
    return matutils.scale_by_diagonal(partition.block, diag)


def _normalize_partition(partition):
    return matutils.normalize_rows(partition.block)


def _multiply_partition(partition, mat):
    return np.asarray(partition.block.dot(mat), dtype=np.float64)


def _column(block, column):
    if scipy.sparse.issparse(block):
        return block.getcol(column).toarray().ravel()
    return np.asarray(block[:, column], dtype=np.float64).ravel()


def _top_partition(partition, n, column):
    scores = _column(partition.block, column)
    best = matutils.argsort_desc(scores, n, tiebreak=partition.ids)
    return [(float(scores[pos]), int(partition.ids[pos])) for pos in best]


def _lookup_partition(partition, row_id):
    positions = np.flatnonzero(partition.ids == row_id)
    if not positions.size:
        return None
    return matutils.row(partition.block, int(positions[0]))


def _gramian_partition(partition):
    block = partition.block
    result = block.T.dot(block)
    if scipy.sparse.issparse(result):
        result = result.toarray()
    return np.asarray(result, dtype=np.float64)


def _gramian_multiply_partition(partition, vec):
    block = partition.block
    return np.asarray(block.T.dot(block.dot(vec)), dtype=np.float64).ravel()


def _rank_key(item):
    score, row_id = item
    return score, -row_id


def merge_top(left, right, n):
    """Merge two partial top-`n` lists of (score, row index) into one.

    The merge is associative and commutative, so partial results can be combined in any order.
    Equal scores are ordered by ascending row index.

    """
    return heapq.nlargest(n, itertools.chain(left, right), key=_rank_key)


class RowMatrix(object):
    """A matrix stored as a list of row blocks (:class:`~conceptspace.distributed.Partition`).

    Each row carries a unique integer index, assigned when the matrix is built from rows and preserved through all
    row-wise transformations. The index is the only way to identify a row: row order across partitions is not
    meaningful, and looking a row up by index (:meth:`~conceptspace.distributed.RowMatrix.lookup`) scans all
    partitions.

    """
    def __init__(self, partitions, num_cols=None, processes=None):
        """

        Parameters
        ----------
        partitions : iterable of :class:`~conceptspace.distributed.Partition`
            The row blocks.
        num_cols : int, optional
            Number of columns. Inferred from the partitions if not given.
        processes : int, optional
            Number of worker processes used to process partitions; `None` means :const:`PARALLEL_PARTITIONS`.

        """
        self.partitions = list(partitions)
        if num_cols is None:
            if not self.partitions:
                raise ValueError("cannot infer the number of columns of a matrix without partitions")
            num_cols = self.partitions[0].block.shape[1]
        self.num_cols = int(num_cols)
        for partition in self.partitions:
            if partition.block.shape[1] != self.num_cols:
                raise ValueError(
                    "dimension mismatch: partition has %i columns, expected %i"
                    % (partition.block.shape[1], self.num_cols)
                )
        self.processes = processes

    @classmethod
    def from_rows(cls, rows, num_cols=None, num_partitions=DEFAULT_NUM_PARTITIONS, processes=None):
        """Split a sequence of rows into partitions, assigning a unique index to each row.

        Parameters
        ----------
        rows : iterable of {array_like, scipy.sparse row vector}
            The rows. Sparse rows produce sparse (CSR) partitions, anything else dense ones.
        num_cols : int, optional
            Number of columns. Inferred from the first row if not given.
        num_partitions : int, optional
            Maximum number of partitions; fewer are created if there are not enough rows.
        processes : int, optional
            See :class:`~conceptspace.distributed.RowMatrix`.

        Returns
        -------
        :class:`~conceptspace.distributed.RowMatrix`
            The partitioned matrix. Row `i` of partition `p` (out of `P` partitions) gets the index `p + i * P`.

        """
        rows = list(rows)
        if num_cols is None:
            if not rows:
                raise ValueError("cannot infer the number of columns from zero rows")
            first = rows[0]
            num_cols = first.shape[1] if scipy.sparse.issparse(first) else len(np.asarray(first).ravel())
        chunksize = max(1, int(math.ceil(1.0 * len(rows) / max(1, num_partitions))))
        chunks = list(utils.grouper(rows, chunksize))
        partitions = []
        for partition_no, chunk in enumerate(chunks):
            ids = partition_no + len(chunks) * np.arange(len(chunk), dtype=np.int64)
            if any(scipy.sparse.issparse(vec) for vec in chunk):
                block = scipy.sparse.vstack([scipy.sparse.csr_matrix(vec) for vec in chunk], format='csr')
            else:
                block = np.array([np.asarray(vec, dtype=np.float64).ravel() for vec in chunk], dtype=np.float64)
            if block.shape[1] != num_cols:
                raise ValueError("dimension mismatch: rows have %i columns, expected %i" % (block.shape[1], num_cols))
            partitions.append(Partition(ids, block))
        logger.debug("split %i rows into %i partitions", len(rows), len(partitions))
        return cls(partitions, num_cols=num_cols, processes=processes)

    def __len__(self):
        """Get the number of rows."""
        return sum(len(partition) for partition in self.partitions)

    num_rows = __len__

    @property
    def shape(self):
        return len(self), self.num_cols

    def __str__(self):
        return "RowMatrix(%i rows x %i columns in %i partitions)" % (len(self), self.num_cols, len(self.partitions))

    def map_partitions(self, func):
        """Apply `func` to every partition, returning the list of results (one per partition, in order).

        This is a barrier: it returns only once all partitions have been processed.

        Parameters
        ----------
        func : callable
            Function of one :class:`~conceptspace.distributed.Partition`. Must be picklable
            (a module-level function or a :func:`functools.partial` of one) when running in parallel.

        Raises
        ------
        RuntimeError
            If `func` fails on any partition. No partial results are returned.

        """
        tasks = [(func, partition_no, partition) for partition_no, partition in enumerate(self.partitions)]
        processes = self.processes if self.processes is not None else PARALLEL_PARTITIONS
        logger.debug("applying %s to %i partitions", _func_name(func), len(tasks))
        if processes and processes > 1 and len(tasks) > 1:
            logger.debug("spawning %i processes", processes)
            pool = multiprocessing.Pool(processes)
            try:
                return pool.map(_run_task, tasks, chunksize=1)
            finally:
                # gc doesn't seem to collect the Pools reliably, so terminate manually
                pool.terminate()
        return [_run_task(task) for task in tasks]

    def transform(self, func, num_cols=None):
        """Replace each partition's block with `func(partition)`, keeping the row indices.

        Parameters
        ----------
        func : callable
            Function of one :class:`~conceptspace.distributed.Partition`, returning a 2D block with the same
            number of rows.
        num_cols : int, optional
            Number of columns of the result; defaults to the current number of columns.

        Returns
        -------
        :class:`~conceptspace.distributed.RowMatrix`
            New matrix; `self` is not modified.

        """
        blocks = self.map_partitions(func)
        partitions = [Partition(partition.ids, block) for partition, block in zip(self.partitions, blocks)]
        return RowMatrix(
            partitions, num_cols=self.num_cols if num_cols is None else num_cols, processes=self.processes,
        )

    def scale(self, diag):
        """Multiply by a diagonal matrix represented by a vector: `result[i, j] = self[i, j] * diag[j]`.

        Raises
        ------
        ValueError
            If `len(diag)` differs from the number of columns. Checked before any partition is touched.

        """
        diag = matutils.check_diagonal(diag, self.num_cols)
        return self.transform(functools.partial(_scale_partition, diag=diag))

    def normalize(self):
        """Divide every row by its Euclidean length. All-zero rows become rows of NaN."""
        return self.transform(_normalize_partition)

    def multiply(self, mat):
        """Multiply by a local matrix (or vector) on the right.

        Parameters
        ----------
        mat : array_like
            Either a `num_cols x m` matrix, or a vector of length `num_cols` (treated as a single column).

        Returns
        -------
        :class:`~conceptspace.distributed.RowMatrix`
            The `num_rows x m` product, with the row indices of `self`.

        Raises
        ------
        ValueError
            On dimension mismatch.

        """
        mat = np.asarray(mat, dtype=np.float64)
        if mat.ndim == 1:
            mat = matutils.as_column(mat)
        if mat.ndim != 2 or mat.shape[0] != self.num_cols:
            raise ValueError(
                "dimension mismatch: cannot multiply %i columns by a %s matrix" % (self.num_cols, mat.shape)
            )
        return self.transform(functools.partial(_multiply_partition, mat=mat), num_cols=mat.shape[1])

    def top(self, n, column=0):
        """Get the `n` largest values of one column, without sorting (or collecting) the whole column.

        Each partition selects its own top `n`; the partial results are then merged by
        :func:`~conceptspace.distributed.merge_top`.

        Parameters
        ----------
        n : int
            How many values to return.
        column : int, optional
            Which column to rank.

        Returns
        -------
        list of (float, int)
            Up to `n` pairs of (value, row index), largest value first, equal values by ascending row index.
            NaN values are never returned.

        """
        column = matutils.check_index(column, self.num_cols, name='column')
        if n <= 0:
            return []
        partials = self.map_partitions(functools.partial(_top_partition, n=n, column=column))
        return functools.reduce(functools.partial(merge_top, n=n), partials, [])

    def lookup(self, row_id):
        """Get the row with index `row_id`, as a 1D dense array.

        Notes
        -----
        There is no index structure: this scans all partitions, `O(num_rows)`.

        Raises
        ------
        ValueError
            If no row has index `row_id`.

        """
        found = [result for result in self.map_partitions(functools.partial(_lookup_partition, row_id=row_id))
                 if result is not None]
        if not found:
            raise ValueError("row %s not found in %s" % (row_id, self))
        assert len(found) == 1, "row index %s is not unique" % row_id
        return found[0]

    def gramian(self):
        """Compute the dense `num_cols x num_cols` Gramian matrix `A^T * A`, summed across partitions."""
        logger.info("computing %i x %i Gramian matrix over %i partitions", self.num_cols, self.num_cols,
                    len(self.partitions))
        result = np.zeros((self.num_cols, self.num_cols), dtype=np.float64)
        for part in self.map_partitions(_gramian_partition):
            result += part
        return result

    def gramian_multiply(self, vec):
        """Compute `A^T * (A * vec)` in one pass over the partitions, without forming the Gramian."""
        vec = np.asarray(vec, dtype=np.float64).ravel()
        if vec.shape[0] != self.num_cols:
            raise ValueError("dimension mismatch: vector of %i entries, expected %i" % (vec.shape[0], self.num_cols))
        result = np.zeros(self.num_cols, dtype=np.float64)
        for part in self.map_partitions(functools.partial(_gramian_multiply_partition, vec=vec)):
            result += part
        return result

    def iter_rows(self):
        """Iterate over all rows, partition by partition.

        Yields
        ------
        (int, numpy.ndarray)
            Row index and the row as a dense 1D array.

        """
        for partition in self.partitions:
            for pos, row_id in enumerate(partition.ids):
                yield int(row_id), matutils.row(partition.block, pos)

    def collect(self):
        """Materialize the whole matrix in this process. Only meant for small matrices (debugging, tests).

        Returns
        -------
        (numpy.ndarray, numpy.ndarray)
            The row indices (1D) and the dense rows (2D, same order).

        """
        ids, rows = [], []
        for row_id, vec in self.iter_rows():
            ids.append(row_id)
            rows.append(vec)
        return np.array(ids, dtype=np.int64), np.array(rows, dtype=np.float64).reshape(len(rows), self.num_cols)


def scale_by_diagonal(matrix, diag):
    """Multiply a row-partitioned matrix by a diagonal matrix, see :meth:`RowMatrix.scale`."""
    return matrix.scale(diag)


def normalize_rows(matrix):
    """Normalize every row of a row-partitioned matrix to unit length, see :meth:`RowMatrix.normalize`."""
    return matrix.normalize()
