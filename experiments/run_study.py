import argparse
import collections
import json
import sys
from datetime import datetime

import numpy as np

from benchmarks.functions import available, resolve
from experiments.plotting import plot_convergence_overlay, plot_final_boxplot
from optimizer.errors import PSOError
from optimizer.pso import run_optimization
from utils.recorder import append_multi_summary, create_run_dir, save_convergence_csv


def run_trial(function, dim, swarm_size, xmin, xmax, iters, workers, seed, root=None):
    print(f"--- Running {function} dim={dim} workers={workers} (Seed {seed}) ---")
    res = run_optimization(function, dim, swarm_size, xmin, xmax, iters, workers, seed=seed)
    run_dir = create_run_dir(function, "multi", root=root)
    log_path = save_convergence_csv(run_dir, res.history)
    return res, log_path


def main(argv=None):
    parser = argparse.ArgumentParser(description="Repeat a PSO run over several seeds and worker counts")
    parser.add_argument("--function", type=str, default="rastrigin", choices=available())
    parser.add_argument("--dim", type=int, default=2)
    parser.add_argument("--swarm-size", type=int, default=200)
    parser.add_argument("--iters", type=int, default=500)
    parser.add_argument("--workers", type=int, nargs="+", default=[1], help="Worker counts to compare")
    parser.add_argument("--seeds", type=int, default=5, help="Number of seeds per worker count")
    parser.add_argument("--out", type=str, default=None, help="Results root directory (default: data/results)")
    parser.add_argument("--test", action="store_true", help="Run shortened smoke test")
    args = parser.parse_args(argv)

    iters = 20 if args.test else args.iters
    n_seeds = 1 if args.test else args.seeds
    xmin, xmax = resolve(args.function).domain

    rows, logs = [], []
    for workers in args.workers:
        for s in range(n_seeds):
            seed = s + 42  # Reproducible seeds
            try:
                res, log_path = run_trial(args.function, args.dim, args.swarm_size, xmin, xmax,
                                          iters, workers, seed, root=args.out)
            except (PSOError, ValueError) as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
            logs.append(str(log_path))
            rows.append({
                "function": args.function,
                "dim": args.dim,
                "swarm_size": args.swarm_size,
                "iters": iters,
                "workers": workers,
                "seed": seed,
                "best_index": res.best_index,
                "best_f": res.best_fitness,
                "best_x": json.dumps([float(v) for v in res.best_position]),
            })

    summary = append_multi_summary(args.function, rows, root=args.out)
    print(f"Study complete. Summary appended to {summary}")

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    fig_dir = summary.parent
    plot_convergence_overlay(logs, str(fig_dir / f"overlay_{stamp}.png"))
    plot_final_boxplot([r["best_f"] for r in rows], str(fig_dir / f"boxplot_{stamp}.png"))

    print("\n=== Summary of Results ===")
    grouped = collections.defaultdict(list)
    for r in rows:
        grouped[r["workers"]].append(r["best_f"])
    for w, vals in grouped.items():
        print(f"workers={w}: Mean best f = {np.mean(vals):.6f} (Min: {np.min(vals):.6f})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
