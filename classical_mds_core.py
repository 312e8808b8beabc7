"""
Core algorithm for classical (Torgerson) multidimensional scaling.

This module contains:
  - Input resolution (condensed vs square dissimilarities, target dimension)
  - Double centering and symmetrization of the squared dissimilarities
  - Full and truncated symmetric eigensolvers (LAPACK / ARPACK)
  - Eigenvalue filtering, coordinate scaling and sign normalization
  - The error types raised on invalid input

It is intentionally free of demo/CLI/plotting code.
"""


import math
import numbers

import numpy as np
from scipy.linalg import eigh
from scipy.sparse.linalg import eigsh
from scipy.spatial.distance import squareform


# Machine epsilon of the eigenvalue dtype, used by the filter threshold.
EPS = np.finfo(np.float64).eps

# Below this size the dense LAPACK path is always used for partial solves.
ARPACK_MIN_N = 200

SOLVERS = ("auto", "eigh", "subset", "arpack")



######################################################
#### Errors ##########################################
######################################################

class InvalidInputError(ValueError):
    """Base class for arguments rejected before any computation starts."""


class MissingArgumentError(InvalidInputError):
    pass


class ExtraArgumentError(InvalidInputError):
    pass


class InvalidShapeError(InvalidInputError):
    """D is neither a valid condensed vector nor a square matrix."""

    def __init__(self, message, shape=None):
        super().__init__(message)
        self.shape = shape


class InvalidDimensionError(InvalidInputError):
    """Target dimension p is not an integer scalar."""

    def __init__(self, message, value=None):
        super().__init__(message)
        self.value = value


class InvalidValueError(InvalidInputError):
    pass



######################################################
#### Input resolution ################################
######################################################

def condensed_size_to_n(m):
    """
    Number of points n with n(n-1)/2 == m, or None if m is not triangular.
    """
    if m < 1:
        return None
    n = int(math.ceil(math.sqrt(2 * m)))
    if n * (n - 1) // 2 != m:
        return None
    return n


def resolve_dissimilarity(D):
    """
    Bring D to a square (n,n) float64 array.

    Accepted forms:
      - condensed vector: 1-D array, or a single row / single column, of
        length m = n(n-1)/2 with all entries >= 0
      - square (n,n) matrix with any real entries

    The caller's array is never modified; a new array is always returned.
    """
    if D is None:
        raise MissingArgumentError("Dissimilarity input D is missing.")
    try:
        A = np.array(D, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidShapeError("D must be a numeric vector or matrix.") from exc

    if A.ndim == 0 or A.ndim > 2 or A.size == 0:
        raise InvalidShapeError(
            f"D must be a non-empty vector or matrix, got shape {A.shape}.",
            shape=A.shape,
        )
    if not np.all(np.isfinite(A)):
        raise InvalidValueError("D contains NaN or infinite entries.")

    rows = 1 if A.ndim == 1 else A.shape[0]
    cols = A.shape[-1]

    if rows == 1 or (A.ndim == 2 and cols == 1):
        m = A.size
        n = condensed_size_to_n(m)
        if n is None:
            raise InvalidShapeError(
                f"Condensed D has length {m}, which is not n(n-1)/2 for any integer n.",
                shape=A.shape,
            )
        if np.any(A < 0):
            raise InvalidShapeError(
                "Condensed D must have all entries >= 0.", shape=A.shape
            )
        return squareform(A.ravel(), force="tomatrix", checks=False)

    if rows != cols:
        raise InvalidShapeError(
            f"D must be square or condensed, got shape {A.shape}.", shape=A.shape
        )
    return A


def resolve_dimension(p, n):
    """
    Target dimension: None -> n, otherwise an integer clamped to [1, n].
    """
    if p is None:
        return n
    if isinstance(p, bool):
        raise InvalidDimensionError("p must be an integer, not a bool.", value=p)
    if isinstance(p, np.ndarray):
        if p.size != 1:
            raise InvalidDimensionError(
                f"p must be a scalar, got shape {p.shape}.", value=p
            )
        p = p.item()
    if isinstance(p, numbers.Integral):
        p = int(p)
    elif isinstance(p, numbers.Real) and float(p).is_integer():
        p = int(p)
    else:
        raise InvalidDimensionError(f"p must be an integer, got {p!r}.", value=p)
    return min(max(p, 1), n)



######################################################
#### Centering #######################################
######################################################

def double_center(D):
    """
    B = -1/2 * P (D*D) P with P = I - 11^T/n, computed from row, column and
    grand means of D*D instead of forming P.
    """
    D2 = np.asarray(D, dtype=float) ** 2
    row_means = D2.mean(axis=1, keepdims=True)
    col_means = D2.mean(axis=0, keepdims=True)
    grand_mean = D2.mean()
    return -0.5 * (D2 - row_means - col_means + grand_mean)


def symmetrize(B):
    return 0.5 * (B + B.T)


def gram_matrix(D):
    """Symmetrized double-centered Gram matrix of a dissimilarity D."""
    return symmetrize(double_center(resolve_dissimilarity(D)))



######################################################
#### Eigensolvers ####################################
######################################################

def eig_full(B):
    """All eigenpairs of symmetric B (ascending, LAPACK)."""
    return eigh(B)


def eig_top(B, p, solver="subset"):
    """
    Top-p eigenpairs of symmetric B by algebraic value.

    solver:
      - "eigh":   full LAPACK solve, then slice
      - "subset": LAPACK partial solve (subset_by_index)
      - "arpack": Lanczos (eigsh, which="LA"), needs p < n

    Returned order is solver-defined; callers sort.
    """
    n = B.shape[0]
    if p >= n:
        return eig_full(B)

    if solver == "eigh":
        e, V = eig_full(B)
        return e[n - p:], V[:, n - p:]
    if solver == "subset":
        return eigh(B, subset_by_index=[n - p, n - 1])
    if solver == "arpack":
        # Fixed start vector so repeated calls agree; must not lie in the
        # null space of a centered B (which contains the ones vector).
        v0 = np.random.default_rng(0).uniform(-1.0, 1.0, size=n)
        return eigsh(B, k=p, which="LA", v0=v0)
    raise ValueError(f"solver must be one of {SOLVERS}, got {solver!r}.")


def choose_solver(n, p, solver="auto"):
    """Resolve "auto" to a concrete solver name for an (n,n) problem with target p."""
    if solver not in SOLVERS:
        raise ValueError(f"solver must be one of {SOLVERS}, got {solver!r}.")
    if p >= n:
        return "eigh"
    if solver != "auto":
        return solver
    if n >= ARPACK_MIN_N and p <= n // 10:
        return "arpack"
    return "subset"



######################################################
#### Filtering / output ##############################
######################################################

def filter_eigenpairs(e, V):
    """
    Sort eigenpairs descending and keep eigenvalues above
        tau = max|e| * eps^(3/4).

    Small and negative eigenvalues (non-Euclidean D) are dropped.
    Returns (e_kept, V_kept); both may be empty.
    """
    e = np.asarray(e, dtype=float)
    idx = np.argsort(e)[::-1]
    e = e[idx]
    V = V[:, idx]
    if e.size == 0:
        return e, V
    tau = np.max(np.abs(e)) * EPS ** 0.75
    keep = e > tau
    return e[keep], V[:, keep]


def normalize_signs(Y):
    """
    Flip each column so that its entry of largest magnitude is positive.
    Ties go to the first row index; all-zero columns are unchanged.
    """
    if Y.size == 0:
        return Y
    maxind = np.argmax(np.abs(Y), axis=0)
    colsign = np.sign(Y[maxind, np.arange(Y.shape[1])])
    colsign[colsign == 0] = 1.0
    return Y * colsign



######################################################
#### Embedding engine ################################
######################################################

def mds(*args, solver="auto", verbose=False):
    """
    Classical multidimensional scaling.

        Y, e = mds(D)
        Y, e = mds(D, p)

    Parameters
    ----------
    D : array_like
        (n,n) dissimilarity matrix, or its condensed upper triangle of
        length n(n-1)/2 (non-negative), e.g. ``pdist(X, "cityblock")``.
    p : int, optional
        Target dimension. Defaults to n; values are clamped to [1, n].
    solver : {"auto", "eigh", "subset", "arpack"}
        Eigensolver. "auto" solves fully when p == n, with ARPACK for large n
        and small p, and with a LAPACK partial solve otherwise.
    verbose : bool
        Print progress lines.

    Returns
    -------
    Y : ndarray (n, k)
        Rows are point coordinates, k <= min(p, n) retained dimensions.
    e : ndarray (k,)
        Retained eigenvalues of Y Y^T, descending. When nothing survives the
        filter, Y is an (n,1) zero column and e == [0.].

    Raises
    ------
    MissingArgumentError, ExtraArgumentError, InvalidShapeError,
    InvalidDimensionError, InvalidValueError
        All subclasses of InvalidInputError (itself a ValueError).
    """
    pfx = "[mds] "
    if len(args) < 1:
        raise MissingArgumentError("mds() needs a dissimilarity input D.")
    if len(args) > 2:
        raise ExtraArgumentError(
            f"mds() takes at most 2 positional arguments (D, p), got {len(args)}."
        )

    D = resolve_dissimilarity(args[0])
    n = D.shape[0]
    p_in = args[1] if len(args) == 2 else None
    p = resolve_dimension(p_in, n)
    method = choose_solver(n, p, solver)

    if verbose:
        print(f"{pfx}n={n}  p={p}  solver={method}")
        if p_in is not None and p != p_in:
            print(f"{pfx}p={p_in} clamped to {p} (n={n})")

    B = symmetrize(double_center(D))

    # Nothing survives the filter for a zero B, and ARPACK rejects it outright.
    if not np.any(B):
        if verbose:
            print(f"{pfx}zero Gram matrix; degenerate embedding")
        return np.zeros((n, 1)), np.zeros(1)

    if p == n:
        evals, evecs = eig_full(B)
    else:
        evals, evecs = eig_top(B, p, solver=method)

    e, V = filter_eigenpairs(evals, evecs)

    if e.size == 0:
        if verbose:
            print(f"{pfx}no eigenvalue above threshold; degenerate embedding")
        return np.zeros((n, 1)), np.zeros(1)

    Y = normalize_signs(V * np.sqrt(e))

    if verbose:
        print(f"{pfx}kept k={e.size} of {evals.size} eigenvalues  "
              f"e_max={e[0]:.3e}  e_min={e[-1]:.3e}")
    return Y, e
