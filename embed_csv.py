#!/usr/bin/env python3
"""
Embed a dissimilarity matrix stored as CSV with classical MDS.

Input formats:
1. Square matrix: header row of labels, labels in the first column.
2. Condensed (--condensed): the n(n-1)/2 upper-triangle values, no header,
   on one row or one column.

Writes the coordinates (columns dim_1..dim_k, one row per label) and,
optionally, the retained eigenvalues.
"""

import argparse
import sys

import numpy as np
import pandas as pd

from classical_mds_core import mds, SOLVERS, InvalidInputError


def read_dissimilarities(input_file: str, condensed: bool = False):
    """
    Read a dissimilarity CSV.

    Returns (D, labels) where labels is None for condensed input.
    """
    if condensed:
        df = pd.read_csv(input_file, header=None)
        return df.to_numpy(dtype=float).ravel(), None
    df = pd.read_csv(input_file, index_col=0)
    return df.to_numpy(dtype=float), [str(lab) for lab in df.index]


def embed_file(input_file: str,
               output_file: str,
               p: int = None,
               condensed: bool = False,
               eigenvalues_file: str = None,
               solver: str = "auto",
               verbose: bool = True):
    """
    Run classical MDS on a CSV file and write the coordinates.

    Returns the coordinates as a DataFrame.
    """
    D, labels = read_dissimilarities(input_file, condensed=condensed)
    if p is None:
        Y, e = mds(D, solver=solver, verbose=verbose)
    else:
        Y, e = mds(D, p, solver=solver, verbose=verbose)

    if labels is None:
        labels = [f"point_{i + 1}" for i in range(Y.shape[0])]
    coords = pd.DataFrame(
        Y,
        index=pd.Index(labels, name="label"),
        columns=[f"dim_{j + 1}" for j in range(Y.shape[1])],
    )
    coords.to_csv(output_file)
    if verbose:
        print(f"Wrote {coords.shape[0]} points x {coords.shape[1]} dims to: {output_file}")

    if eigenvalues_file is not None:
        pd.DataFrame({'dimension': np.arange(1, e.size + 1), 'eigenvalue': e}) \
            .to_csv(eigenvalues_file, index=False)
        if verbose:
            print(f"Wrote eigenvalues to: {eigenvalues_file}")

    return coords


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Classical MDS of a dissimilarity CSV")
    parser.add_argument("input", type=str, help="Dissimilarity CSV")
    parser.add_argument("--output", type=str, default="coordinates.csv")
    parser.add_argument("--p", type=int, default=None, help="Target dimension (default: all)")
    parser.add_argument("--condensed", action="store_true",
                        help="Input holds the condensed upper triangle, no header")
    parser.add_argument("--eigenvalues", type=str, default=None,
                        help="Also write retained eigenvalues to this CSV")
    parser.add_argument("--solver", type=str, default="auto", choices=list(SOLVERS))
    parser.add_argument("--quiet", action="store_true")

    args = parser.parse_args()

    try:
        embed_file(
            input_file=args.input,
            output_file=args.output,
            p=args.p,
            condensed=args.condensed,
            eigenvalues_file=args.eigenvalues,
            solver=args.solver,
            verbose=not args.quiet,
        )
    except InvalidInputError as exc:
        print(f"Bad input in {args.input}: {exc}", file=sys.stderr)
        sys.exit(2)
