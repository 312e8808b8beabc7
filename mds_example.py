import argparse
import time
from pathlib import Path

import numpy as np

from classical_mds_core import mds, SOLVERS, InvalidInputError
from classical_mds_matrices import (
    unit_square_points,
    circle_points,
    random_points,
    pairwise_dissimilarities,
    perturb_dissimilarities,
)
from classical_mds_utils import (
    plot_embedding,
    distance_recovery_error,
    euclidean_check,
    explained_proportion,
)


def build_scenario(name, n=20, dim=3, seed=0, metric="euclidean", noise=0.1):
    """
    Returns (D, p, description) for a named demo scenario.
    """
    if name == "square":
        X = unit_square_points()
        return pairwise_dissimilarities(X), 2, "unit square corners"
    if name == "circle":
        X = circle_points(n)
        return pairwise_dissimilarities(X), 2, f"{n} points on a circle"
    if name == "random":
        X = random_points(n, dim=dim, seed=seed)
        D = pairwise_dissimilarities(X, metric=metric, condensed=True)
        return D, dim, f"{n} Gaussian points in R^{dim}, metric={metric} (condensed)"
    if name == "noisy":
        X = random_points(n, dim=dim, seed=seed)
        D = perturb_dissimilarities(pairwise_dissimilarities(X), noise=noise, seed=seed)
        return D, dim, f"{n} Gaussian points in R^{dim}, {noise:.0%} dissimilarity noise"
    raise ValueError(f"Unknown scenario {name!r}.")


def run_scenario(name, p=None, solver="auto", outdir=None, verbose=False, **kwargs):
    D, p_default, desc = build_scenario(name, **kwargs)
    p = p_default if p is None else p

    print(f"Scenario '{name}': {desc}, p={p}")
    t0 = time.time()
    Y, e = mds(D, p, solver=solver, verbose=verbose)
    dt = time.time() - t0

    abs_err, rel_err = distance_recovery_error(D, Y)
    is_euc, neg_ratio = euclidean_check(D)
    prop = explained_proportion(e)

    print(f"  k={e.size}  eigenvalues={np.array2string(e, precision=4)}")
    print(f"  explained={np.array2string(prop, precision=3)}")
    print(f"  max|D - D(Y)|={abs_err:.3e} (rel {rel_err:.3e})  "
          f"euclidean={is_euc}  neg/pos={neg_ratio:.3e}  ({dt:.4f}s)")

    if outdir is not None:
        out_png = Path(outdir) / f"mds_{name}.png"
        plot_embedding(Y, e, filename=out_png, add_title=True)
        print(f"  Saved figure to: {out_png}")

    return Y, e


def benchmark_solvers(N_values=None, p=2, dim=5, seed=0, verbose=True):
    """
    Time each eigensolver on random Euclidean configurations and check that
    they agree with the full solve.

    Parameters
    ----------
    N_values : list of int
        Number of points. Default: [100, 200, 500, 1000]
    p : int
        Target dimension.
    dim : int
        Dimension of the generating configuration.

    Returns
    -------
    results : list of dict
    """
    if N_values is None:
        N_values = [100, 200, 500, 1000]

    solvers = [s for s in SOLVERS if s != "auto"]
    results = []

    if verbose:
        print("\n" + "=" * 70)
        print(f"BENCHMARK: eigensolvers, p={p}, generating dim={dim}")
        print("=" * 70)
        print(f"{'N':>6} " + " ".join(f"{s + ' (s)':>12}" for s in solvers) + f" {'max |de|':>12}")
        print("-" * 70)

    for N in N_values:
        X = random_points(N, dim=dim, seed=seed)
        D = pairwise_dissimilarities(X)

        times = {}
        evals = {}
        for s in solvers:
            t0 = time.time()
            _, e = mds(D, p, solver=s)
            times[s] = time.time() - t0
            evals[s] = e

        ref = evals["eigh"]
        diff = max(float(np.max(np.abs(evals[s] - ref))) if evals[s].shape == ref.shape else np.inf
                   for s in solvers)

        if verbose:
            print(f"{N:>6} " + " ".join(f"{times[s]:>11.4f}s" for s in solvers) + f" {diff:>12.2e}")

        results.append({'N': N, 'times': times, 'max_eig_diff': diff})

    if verbose:
        print("=" * 70)

    return results


def main():
    parser = argparse.ArgumentParser(description="Classical MDS demos on synthetic configurations.")
    parser.add_argument("--scenario", type=str, default="all",
                        choices=["square", "circle", "random", "noisy", "all"])
    parser.add_argument("--n", type=int, default=20, help="Number of points (circle/random/noisy).")
    parser.add_argument("--dim", type=int, default=3, help="Dimension of the generating configuration.")
    parser.add_argument("--p", type=int, default=None, help="Target dimension (default: scenario's own).")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--metric", type=str, default="euclidean", help="pdist metric for 'random'.")
    parser.add_argument("--noise", type=float, default=0.1, help="Relative noise for 'noisy'.")
    parser.add_argument("--solver", type=str, default="auto", choices=list(SOLVERS))
    parser.add_argument("--outdir", type=str, default=None, help="Directory to save figures.")
    parser.add_argument("--verbose", action="store_true", help="Verbose solver output.")
    parser.add_argument("--benchmark", action="store_true", help="Benchmark the eigensolvers.")
    parser.add_argument("--N", type=str, default="100,200,500,1000",
                        help="Comma-separated N values for benchmark (default: 100,200,500,1000)")
    args = parser.parse_args()

    if args.outdir is not None:
        Path(args.outdir).mkdir(parents=True, exist_ok=True)

    if args.benchmark:
        N_values = [int(n.strip()) for n in args.N.split(",")]
        benchmark_solvers(N_values=N_values, p=args.p or 2, dim=args.dim, seed=args.seed)
        return

    names = ["square", "circle", "random", "noisy"] if args.scenario == "all" else [args.scenario]
    print("=" * 70)
    for name in names:
        try:
            run_scenario(
                name,
                p=args.p,
                solver=args.solver,
                outdir=args.outdir,
                verbose=args.verbose,
                n=args.n,
                dim=args.dim,
                seed=args.seed,
                metric=args.metric,
                noise=args.noise,
            )
        except InvalidInputError as exc:
            print(f"  FAILED: {exc}")
        print("-" * 70)


if __name__ == "__main__":
    main()
