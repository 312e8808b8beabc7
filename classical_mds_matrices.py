"""
Point configurations and dissimilarity generators used for demos/experiments.

This module contains:
  - Point generators (unit square, circle, grid, random Gaussian cloud)
  - Caller-side dissimilarities via scipy's pdist (any metric or callable)
  - Condensed-form conversion and symmetric noise for non-Euclidean inputs

It should not contain the MDS solver or plotting.
"""


import numpy as np
from scipy.spatial.distance import pdist, squareform



def unit_square_points():
    """Corners of the unit square: (0,0), (1,0), (0,1), (1,1)."""
    return np.array([[0.0, 0.0],
                     [1.0, 0.0],
                     [0.0, 1.0],
                     [1.0, 1.0]])

def circle_points(n, radius=1.0):
    """n equispaced points on a circle of the given radius."""
    t = 2.0 * np.pi * np.arange(n) / n
    return radius * np.column_stack([np.cos(t), np.sin(t)])

def grid_points(rows: int, cols: int, spacing: float = 1.0) -> np.ndarray:
    """
    Regular rows x cols lattice in the plane, row-major order.
    """
    if not (isinstance(rows, int) and rows >= 1 and isinstance(cols, int) and cols >= 1):
        raise ValueError("rows and cols must be positive integers")
    r, c = np.meshgrid(np.arange(rows), np.arange(cols), indexing="ij")
    return spacing * np.column_stack([c.ravel(), r.ravel()]).astype(float)

def random_points(n: int, dim: int = 3, seed: int = 0, scale: float = 1.0) -> np.ndarray:
    """
    n points drawn i.i.d. from N(0, scale^2 I_dim).
    """
    if not (isinstance(n, int) and n >= 1):
        raise ValueError("n must be a positive integer")
    if not (isinstance(dim, int) and dim >= 1):
        raise ValueError("dim must be a positive integer")
    rng = np.random.default_rng(seed)
    return scale * rng.standard_normal((n, dim))



def pairwise_dissimilarities(X, metric="euclidean", condensed=False, **kwargs):
    """
    Pairwise dissimilarities between the rows of X.

    Parameters
    ----------
    X : array (n, d)
        Point coordinates.
    metric : str or callable, default "euclidean"
        Anything scipy.spatial.distance.pdist accepts ("cityblock",
        "minkowski", a callable f(u, v) -> float, ...).
    condensed : bool, default False
        Return the length n(n-1)/2 upper-triangle vector instead of the
        (n, n) matrix.
    kwargs
        Extra metric parameters forwarded to pdist (e.g. p=3, w=weights).
    """
    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X[:, None]
    d = pdist(X, metric=metric, **kwargs)
    if condensed:
        return d
    return squareform(d)

def to_condensed(D):
    """Upper triangle of a symmetric zero-diagonal (n,n) matrix, row by row."""
    D = np.asarray(D, dtype=float)
    return squareform(D, force="tovector", checks=False)

def perturb_dissimilarities(D, noise=0.1, seed=0):
    """
    Add symmetric multiplicative noise to D, keeping a zero diagonal and
    non-negative entries. The result is in general not Euclidean, so its
    Gram matrix has negative eigenvalues.
    """
    D = np.asarray(D, dtype=float)
    n = D.shape[0]
    rng = np.random.default_rng(seed)
    E = rng.uniform(-noise, noise, size=(n, n))
    E = np.triu(E, 1)
    E = E + E.T
    out = np.maximum(D * (1.0 + E), 0.0)
    np.fill_diagonal(out, 0.0)
    return out
