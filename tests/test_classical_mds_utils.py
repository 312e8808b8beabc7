"""
Tests for embedding diagnostics, generators and plotting.
"""

import numpy as np
import pytest

from classical_mds_core import mds
from classical_mds_matrices import (
    unit_square_points,
    circle_points,
    grid_points,
    random_points,
    pairwise_dissimilarities,
    to_condensed,
    perturb_dissimilarities,
)
from classical_mds_utils import (
    embedding_distances,
    distance_recovery_error,
    strain,
    euclidean_check,
    explained_proportion,
    plot_embedding,
)


class TestGenerators:

    def test_grid_shape(self):
        X = grid_points(2, 3)
        assert X.shape == (6, 2)
        np.testing.assert_array_equal(X[1], [1.0, 0.0])

    def test_grid_rejects_bad_size(self):
        with pytest.raises(ValueError):
            grid_points(0, 3)

    def test_circle_radius(self):
        X = circle_points(8, radius=2.0)
        np.testing.assert_allclose(np.linalg.norm(X, axis=1), 2.0)

    def test_random_points_reproducible(self):
        np.testing.assert_array_equal(random_points(5, seed=3), random_points(5, seed=3))

    def test_condensed_round_trip(self):
        D = pairwise_dissimilarities(random_points(6, dim=2))
        d = pairwise_dissimilarities(random_points(6, dim=2), condensed=True)
        np.testing.assert_allclose(to_condensed(D), d)

    def test_custom_metric(self):
        X = unit_square_points()
        D = pairwise_dissimilarities(X, metric="cityblock")
        assert D[0, 3] == pytest.approx(2.0)
        w = np.array([0.2, 0.8])
        D_w = pairwise_dissimilarities(
            X, metric=lambda u, v: np.sqrt(np.sum(w * (u - v) ** 2)))
        assert D_w[0, 1] == pytest.approx(np.sqrt(0.2))

    def test_perturbation_keeps_structure(self):
        D = pairwise_dissimilarities(random_points(7, dim=2))
        P = perturb_dissimilarities(D, noise=0.2, seed=1)
        np.testing.assert_array_equal(P, P.T)
        np.testing.assert_array_equal(np.diag(P), 0.0)
        assert np.all(P >= 0)


class TestDiagnostics:

    def test_embedding_distances(self):
        Y = np.array([[0.0, 0.0], [3.0, 4.0]])
        np.testing.assert_allclose(embedding_distances(Y), [[0.0, 5.0], [5.0, 0.0]])

    def test_exact_embedding_has_no_error(self):
        D = pairwise_dissimilarities(random_points(10, dim=3, seed=2))
        Y, _ = mds(D, 3)
        abs_err, rel_err = distance_recovery_error(D, Y)
        assert abs_err < 1e-8
        assert rel_err < 1e-8
        assert strain(D, Y) < 1e-8

    def test_truncated_embedding_has_strain(self):
        D = pairwise_dissimilarities(circle_points(10))
        Y, _ = mds(D, 1)
        assert strain(D, Y) > 0.1

    def test_recovery_error_accepts_condensed(self):
        d = pairwise_dissimilarities(unit_square_points(), condensed=True)
        Y, _ = mds(d, 2)
        abs_err, _ = distance_recovery_error(d, Y)
        assert abs_err < 1e-8

    def test_recovery_error_size_mismatch(self):
        D = pairwise_dissimilarities(unit_square_points())
        with pytest.raises(ValueError):
            distance_recovery_error(D, np.zeros((3, 2)))

    def test_euclidean_check(self):
        D = pairwise_dissimilarities(random_points(12, dim=3, seed=4))
        is_euc, ratio = euclidean_check(D)
        assert is_euc
        assert ratio == 0.0
        is_euc, ratio = euclidean_check(perturb_dissimilarities(D, noise=0.3, seed=4))
        assert not is_euc
        assert ratio > 0.0

    def test_explained_proportion(self):
        np.testing.assert_allclose(explained_proportion([3.0, 1.0]), [0.75, 0.25])
        np.testing.assert_array_equal(explained_proportion([0.0]), [0.0])


class TestPlotting:

    def test_plot_saves_file(self, tmp_path):
        D = pairwise_dissimilarities(unit_square_points())
        Y, e = mds(D, 2)
        out = tmp_path / "square.png"
        plot_embedding(Y, e, labels=["a", "b", "c", "d"], filename=out, add_title=True)
        assert out.exists()

    def test_plot_single_dimension(self, tmp_path):
        Y, e = mds([1.0, 2.0, 3.0])
        out = tmp_path / "line.png"
        plot_embedding(Y, e, filename=out)
        assert out.exists()
