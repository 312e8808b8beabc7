"""
Tests for the CSV driver and the demo scenarios.
"""

import subprocess
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from classical_mds_core import InvalidShapeError
from classical_mds_matrices import random_points, pairwise_dissimilarities
from classical_mds_utils import embedding_distances
from embed_csv import read_dissimilarities, embed_file
from mds_example import build_scenario, run_scenario, benchmark_solvers


class TestEmbedCsv:

    def test_square_csv_round_trip(self, tmp_path):
        D = pairwise_dissimilarities(random_points(6, dim=2, seed=1))
        labels = [f"s{i}" for i in range(6)]
        src = tmp_path / "dist.csv"
        pd.DataFrame(D, index=labels, columns=labels).to_csv(src)

        out = tmp_path / "coords.csv"
        eig = tmp_path / "eig.csv"
        coords = embed_file(str(src), str(out), p=2, eigenvalues_file=str(eig), verbose=False)

        assert list(coords.columns) == ["dim_1", "dim_2"]
        assert list(coords.index) == labels

        written = pd.read_csv(out, index_col=0)
        np.testing.assert_allclose(embedding_distances(written.to_numpy()), D, atol=1e-6)

        e = pd.read_csv(eig)
        assert list(e.columns) == ["dimension", "eigenvalue"]
        assert len(e) == 2
        assert np.all(np.diff(e["eigenvalue"].to_numpy()) <= 0)

    def test_condensed_csv(self, tmp_path):
        d = pairwise_dissimilarities(random_points(5, dim=3, seed=2), condensed=True)
        src = tmp_path / "condensed.csv"
        pd.DataFrame([d]).to_csv(src, header=False, index=False)

        D, labels = read_dissimilarities(str(src), condensed=True)
        assert labels is None
        assert D.shape == (10,)

        coords = embed_file(str(src), str(tmp_path / "out.csv"), condensed=True, verbose=False)
        assert coords.shape == (5, 3)
        assert coords.index[0] == "point_1"

    def test_non_square_csv_is_rejected(self, tmp_path):
        src = tmp_path / "bad.csv"
        pd.DataFrame(np.ones((3, 4)), index=["a", "b", "c"]).to_csv(src)
        with pytest.raises(InvalidShapeError):
            embed_file(str(src), str(tmp_path / "out.csv"), verbose=False)

    def test_script_reports_bad_input(self, tmp_path):
        """Invalid input is reported on stderr with exit status 2, no traceback."""
        src = tmp_path / "bad.csv"
        pd.DataFrame(np.ones((3, 4)), index=["a", "b", "c"]).to_csv(src)
        script = Path(__file__).resolve().parent.parent / "embed_csv.py"
        proc = subprocess.run(
            [sys.executable, str(script), str(src), "--output", str(tmp_path / "out.csv")],
            capture_output=True,
            text=True,
        )
        assert proc.returncode == 2
        assert "Bad input in" in proc.stderr
        assert "Traceback" not in proc.stderr
        assert not (tmp_path / "out.csv").exists()


class TestExample:

    def test_square_scenario(self):
        D, p, desc = build_scenario("square")
        assert D.shape == (4, 4)
        assert p == 2

    def test_unknown_scenario(self):
        with pytest.raises(ValueError):
            build_scenario("torus")

    @pytest.mark.parametrize("name", ["square", "circle", "random", "noisy"])
    def test_run_scenario(self, name, tmp_path, capsys):
        Y, e = run_scenario(name, outdir=tmp_path, n=12, dim=3)
        assert Y.shape[0] == (4 if name == "square" else 12)
        assert np.all(e > 0)
        assert (tmp_path / f"mds_{name}.png").exists()
        assert f"Scenario '{name}'" in capsys.readouterr().out

    def test_benchmark_agreement(self):
        results = benchmark_solvers(N_values=[40], p=2, dim=3, verbose=False)
        assert len(results) == 1
        assert results[0]['max_eig_diff'] < 1e-8
        assert set(results[0]['times']) == {"eigh", "subset", "arpack"}
