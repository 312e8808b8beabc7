import numpy as np
import matplotlib.pyplot as plt
from scipy.spatial.distance import pdist, squareform

from classical_mds_core import resolve_dissimilarity, gram_matrix, eig_full, EPS


def plot_embedding(Y, e, labels=None, filename=None, add_title=False):
    """
    Plot 1x2 panels:
        left:   first two coordinates of Y (one point per row)
        right:  retained eigenvalues (scree)

    Title includes the explained proportion of the first two dimensions.
    If Y has a single column, points are drawn on the x-axis.
    """
    Y = np.asarray(Y, dtype=float)
    e = np.asarray(e, dtype=float)

    x = Y[:, 0]
    y = Y[:, 1] if Y.shape[1] > 1 else np.zeros_like(x)

    fig, axes = plt.subplots(1, 2, figsize=(10, 4.5))

    ax = axes[0]
    ax.scatter(x, y, s=25)
    if labels is not None:
        for lab, xi, yi in zip(labels, x, y):
            ax.annotate(str(lab), (xi, yi), fontsize=8,
                        xytext=(3, 3), textcoords="offset points")
    ax.set_xlabel("dim 1")
    ax.set_ylabel("dim 2")
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_title("Embedding")

    ax = axes[1]
    k = np.arange(1, e.size + 1)
    ax.bar(k, e)
    ax.set_xlabel("dimension")
    ax.set_ylabel("eigenvalue")
    ax.set_title("Eigenvalues")

    if add_title:
        prop = explained_proportion(e)
        top2 = float(np.sum(prop[:2]))
        fig.suptitle(rf"Classical MDS, $k={e.size}$, first two dims explain {top2:.3g}",
                     fontsize=9)

    plt.tight_layout(rect=[0, 0, 1, 0.92])

    if filename is not None:
        fig.savefig(filename, dpi=150, bbox_inches="tight")
        plt.close(fig)

    return fig, axes


def embedding_distances(Y):
    """Square matrix of Euclidean distances between the rows of Y."""
    Y = np.asarray(Y, dtype=float)
    if Y.ndim == 1:
        Y = Y[:, None]
    return squareform(pdist(Y))


def distance_recovery_error(D, Y):
    """
    Compare the input dissimilarities with distances among rows of Y.
    Returns (max_abs_err, max_rel_err); the relative error is taken w.r.t.
    max |D| (0 when D is all zeros).
    """
    D = resolve_dissimilarity(D)
    Dy = embedding_distances(Y)
    if Dy.shape != D.shape:
        raise ValueError(f"Y has {Dy.shape[0]} rows but D describes {D.shape[0]} points.")
    abs_err = float(np.max(np.abs(D - Dy)))
    scale = float(np.max(np.abs(D)))
    rel_err = abs_err / scale if scale > 0 else 0.0
    return abs_err, rel_err


def strain(D, Y):
    """
    Normalised strain ||B - Y Y^T||_F / ||B||_F, with B the Gram matrix of D.
    0 for an exact Euclidean embedding.
    """
    B = gram_matrix(D)
    Y = np.asarray(Y, dtype=float)
    nb = np.linalg.norm(B, ord="fro")
    err = np.linalg.norm(B - Y @ Y.T, ord="fro")
    return float(err / nb) if nb > 0 else float(err)


def euclidean_check(D, tol=None):
    """
    Is D (up to rounding) a Euclidean distance matrix?

    Checks the spectrum of the Gram matrix: D is Euclidean iff B is PSD.
    Returns (is_euclidean, negative_ratio) where negative_ratio is
    sum|negative eigenvalues| / sum(positive eigenvalues).
    """
    B = gram_matrix(D)
    lam = eig_full(B)[0]
    lam_max = float(np.max(np.abs(lam))) if lam.size else 0.0
    if tol is None:
        tol = lam_max * EPS ** 0.75
    neg = lam[lam < -tol]
    pos = lam[lam > tol]
    pos_mass = float(np.sum(pos))
    neg_mass = float(np.sum(np.abs(neg)))
    ratio = neg_mass / pos_mass if pos_mass > 0 else 0.0
    return neg.size == 0, ratio


def explained_proportion(e):
    """Fraction of the total retained eigenvalue mass per dimension."""
    e = np.asarray(e, dtype=float)
    total = np.sum(e)
    if total <= 0:
        return np.zeros_like(e)
    return e / total
