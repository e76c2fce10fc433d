import os
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from benchmarks.functions import resolve


def _ensure_dir(path: str):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)


def read_log(csv_path: str) -> pd.DataFrame:
    """Read one convergence.csv written by utils.recorder and coerce columns."""
    df = pd.read_csv(csv_path)
    for c in ["f_best", "f_mean", "f_std", "gbest_f"]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def _semilogy_ok(vals) -> bool:
    # eggholder / holder_table minima are negative
    return bool((np.asarray(vals) > 0).all())


def plot_convergence(csv_path: str, outpath: Optional[str] = None, ykey: str = "gbest_f",
                     title: Optional[str] = None) -> str:
    """
    Convergence curve for a single run, saved next to the CSV by default.
    ykey in {"gbest_f", "f_best", "f_mean"}.
    """
    df = read_log(csv_path)
    fig = plt.figure()
    ax = plt.gca()
    vals = df[ykey]
    if _semilogy_ok(vals):
        ax.semilogy(df["iter"], vals)
    else:
        ax.plot(df["iter"], vals)
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Best fitness")
    ax.grid(True, which="both", linestyle=":")
    ax.set_title(title or "Convergence")

    if outpath is None:
        outpath = os.path.join(os.path.dirname(csv_path), f"{ykey}_conv.png")
    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_convergence_overlay(csv_paths: List[str], outpath: str, ykey: str = "gbest_f") -> str:
    """
    Overlay multiple runs (e.g., different seeds) on one plot.
    """
    fig = plt.figure()
    ax = plt.gca()
    frames = [read_log(p) for p in csv_paths]
    log_scale = all(_semilogy_ok(df[ykey]) for df in frames)
    for df in frames:
        if log_scale:
            ax.semilogy(df["iter"], df[ykey], alpha=0.7)
        else:
            ax.plot(df["iter"], df[ykey], alpha=0.7)
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Best fitness")
    ax.grid(True, which="both", linestyle=":")
    ax.set_title(f"Convergence overlay ({len(csv_paths)} runs)")

    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_final_boxplot(finals: Sequence[float], outpath: str) -> str:
    """
    Boxplot of final best fitness across runs/seeds.
    """
    data = np.asarray(finals, dtype=float)

    fig = plt.figure()
    ax = plt.gca()
    ax.boxplot(data, vert=True, showmeans=True)
    ax.set_xticks([1])
    ax.set_xticklabels([f"{len(data)} runs"])
    ax.set_ylabel("Final best fitness")
    ax.set_title("Distribution of final best fitness")
    ax.grid(True, axis="y", linestyle=":")

    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_swarm_2d(function: str, positions_snapshots: List[np.ndarray], xmin: float, xmax: float,
                  outpath: str, resolution: int = 200) -> str:
    """
    Contour of the benchmark over [xmin, xmax]^2 with the recorded swarm
    snapshots scattered on top, later snapshots darker.
    """
    bench = resolve(function)
    g = np.linspace(xmin, xmax, resolution)
    X, Y = np.meshgrid(g, g)
    Z = np.array([[bench(np.array([a, b])) for a, b in zip(ra, rb)] for ra, rb in zip(X, Y)])

    fig = plt.figure()
    ax = plt.gca()
    ax.contourf(X, Y, Z, levels=40, cmap="viridis", alpha=0.6)
    n = len(positions_snapshots)
    for k, pts in enumerate(positions_snapshots):
        ax.scatter(pts[:, 0], pts[:, 1], s=6, color="k", alpha=0.15 + 0.85 * (k + 1) / max(n, 1))
    ax.set_xlim(xmin, xmax)
    ax.set_ylim(xmin, xmax)
    ax.set_xlabel("x1")
    ax.set_ylabel("x2")
    ax.set_title(f"PSO swarm trajectory ({bench.label})")

    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return outpath
