# experiments/run_opt.py
import argparse
import sys
import time

from benchmarks.functions import available, resolve
from experiments.plotting import plot_convergence, plot_swarm_2d
from optimizer.errors import PSOError
from optimizer.pso import PSO
from optimizer.rng import base_seed
from optimizer.update import C1, C2, W
from utils.recorder import (RunConfig, create_run_dir, save_convergence_csv,
                            save_run_metadata, save_swarm_2d_csv)
from utils.report import print_particle, print_swarm


def format_time(seconds):
    m, s = divmod(int(seconds), 60)
    h, m = divmod(m, 60)
    if h > 0:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"


def optimize(opt: PSO, print_every: int = 0, debug: bool = False):
    """Step `opt` to the end of its budget, printing progress every `print_every` iterations."""
    start_time = time.time()
    if debug:
        print_swarm(opt.swarm)

    while not opt.done():
        opt.step()
        st = opt.state()
        if print_every and (st["iter"] % print_every == 0 or opt.done()):
            elapsed = format_time(time.time() - start_time)
            print(f"[Iter {st['iter']}] Best: {st['gbest_f']:.6e} (particle {st['gbest_index']}) "
                  f"| Mean: {st['f_mean']:.6e} | Elapsed: {elapsed}")
        if debug:
            print(f"\nIteration {st['iter']}:", file=sys.stderr)
            print_particle(opt.swarm.gbest)

    return opt.result()


def build_parser():
    parser = argparse.ArgumentParser(description="Parallel particle swarm optimisation on benchmark functions")
    parser.add_argument("--function", type=str, default="rastrigin", choices=available())
    parser.add_argument("--dim", type=int, default=2)
    parser.add_argument("--swarm-size", type=int, default=200)
    parser.add_argument("--xmin", type=float, default=None, help="Lower bound (default: the function's domain)")
    parser.add_argument("--xmax", type=float, default=None, help="Upper bound (default: the function's domain)")
    parser.add_argument("--iters", type=int, default=500)
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--backend", type=str, default="process", choices=["process", "thread"])
    parser.add_argument("--seed", type=int, default=None, help="Base seed (default: time based)")
    parser.add_argument("--w", type=float, default=W)
    parser.add_argument("--c1", type=float, default=C1)
    parser.add_argument("--c2", type=float, default=C2)
    parser.add_argument("--trace_every", type=int, default=0, help="Record 2D swarm positions every N iters (dim=2 only)")
    parser.add_argument("--print-every", type=int, default=50)
    parser.add_argument("--out", type=str, default=None, help="Results root directory (default: data/results)")
    parser.add_argument("--no-save", action="store_true", help="Do not write CSV/JSON/figures")
    parser.add_argument("--debug", action="store_true", help="Dump the swarm and each iteration's best particle to stderr")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    lo, hi = resolve(args.function).domain
    xmin = lo if args.xmin is None else args.xmin
    xmax = hi if args.xmax is None else args.xmax
    seed = base_seed(args.seed)

    options = dict(w=args.w, c1=args.c1, c2=args.c2, workers=args.workers,
                   backend=args.backend, trace_every=args.trace_every)
    try:
        with PSO(args.function, args.dim, args.swarm_size, xmin, xmax, args.iters,
                 seed=seed, options=options) as opt:
            if args.workers > 1:
                print(f"--- Parallel Mode Enabled: Using {args.workers} {args.backend} workers ---")
            res = optimize(opt, print_every=args.print_every, debug=args.debug)
            trace = opt.positions_trace()
    except (PSOError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Solution:", file=sys.stderr)
    print_particle(opt.swarm.gbest)
    print(f"Best: index={res.best_index} f={res.best_fitness:.6e} x={list(map(float, res.best_position))}")

    if not args.no_save:
        run_dir = create_run_dir(args.function, "single", root=args.out)
        config = RunConfig(args.function, args.dim, args.swarm_size, xmin, xmax, args.iters,
                           args.workers, seed, args.w, args.c1, args.c2, args.backend)
        save_run_metadata(run_dir, config, extra={
            "best_index": res.best_index,
            "best_fitness": res.best_fitness,
            "best_position": [float(v) for v in res.best_position],
        })
        log_path = save_convergence_csv(run_dir, res.history)
        print("Saved convergence plot:", plot_convergence(str(log_path), title=f"{args.function}, dim={args.dim}, seed={seed}"))
        if trace:
            save_swarm_2d_csv(run_dir, trace)
            out_png = plot_swarm_2d(args.function, trace, xmin, xmax, str(run_dir / "swarm2d.png"))
            print("Saved 2D swarm trajectory:", out_png)

    return 0


if __name__ == "__main__":
    sys.exit(main())
