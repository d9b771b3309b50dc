"""CLI entry point for trnbias."""

import argparse
import os
import sys
import time

from trnbias.bias import run_replications
from trnbias.engine import Criterion
from trnbias.rng import DEFAULT_SEED

USAGE = """
Usage: trnbias  which  ncases trend  nreps
  which - 0=mean return  1=profit factor  2=Sharpe ratio
  ncases - number of training and test cases
  trend - Amount of trending, 0 for flat system
  nreps - number of test replications"""

_CRITERION_LABELS = {
    Criterion.MEAN_RETURN: "mean return",
    Criterion.PROFIT_FACTOR: "profit factor",
    Criterion.SHARPE_RATIO: "Sharpe ratio",
}


class _UsageParser(argparse.ArgumentParser):
    """Any parse failure prints the fixed usage text and exits with status 1."""

    def error(self, message):
        print(USAGE, file=sys.stderr)
        print(f"\nError: {message}", file=sys.stderr)
        sys.exit(1)


def _default_seed(parser):
    env = os.environ.get("TRNBIAS_SEED")
    if not env:
        return DEFAULT_SEED
    try:
        return int(env)
    except ValueError:
        parser.error(f"TRNBIAS_SEED must be an integer, got {env!r}")


def _build_parser():
    parser = _UsageParser(
        prog="trnbias",
        description="trnbias - Explore training bias of an optimized MA crossover rule",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  trnbias 0 500 0.0 1000        # flat market, mean-return criterion
  trnbias 1 1000 0.2 10         # trending market, profit-factor criterion
  trnbias 2 1000 0.02 100 --verbose

The seed defaults to $TRNBIAS_SEED when set, else 123456789.
        """,
    )
    parser.add_argument("which", type=int, help="0=mean return  1=profit factor  2=Sharpe ratio")
    parser.add_argument("ncases", type=int, help="Number of training and test cases")
    parser.add_argument("trend", type=float, help="Amount of trending, 0 for flat system")
    parser.add_argument("nreps", type=int, help="Number of test replications")
    parser.add_argument("--seed", type=int, default=None,
                        help="Generator seed (default: $TRNBIAS_SEED or 123456789)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print the fitted lookbacks and scores of every replication")
    return parser


def _display_trials(report):
    """Print one line per replication: rep, lookbacks, IS, OOS, IS - OOS."""
    print(f"\n{'Rep':>4} {'Short':>5} {'Long':>5} {'IS':>9} {'OOS':>9} {'IS-OOS':>10}")
    print("-" * 46)
    for rep, short, long, is_score, oos_score in report.trials.iter_rows():
        print(f"{rep:>4} {short:>5} {long:>5} {is_score:>9.4f} {oos_score:>9.4f} "
              f"({is_score - oos_score:>8.4f})")


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.ncases < 2 or args.which < 0 or args.which > 2 or args.nreps < 1:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    criterion = Criterion(args.which)
    seed = args.seed if args.seed is not None else _default_seed(parser)

    print("=" * 70)
    print("  TRNBIAS - Training Bias Explorer")
    print("=" * 70)
    print(f"\nwhich={args.which} ncases={args.ncases} trend={args.trend:.3f} nreps={args.nreps}")

    t0 = time.perf_counter()
    print(f"\n[*] Running {args.nreps} replication(s), "
          f"optimizing {_CRITERION_LABELS[criterion]} (seed {seed})...")
    report = run_replications(criterion, args.ncases, args.trend, args.nreps, seed=seed)
    print(f"    Done in {report.elapsed:.4f}s "
          f"({args.nreps / max(report.elapsed, 0.0001):.1f} replications/sec)")

    if args.verbose:
        _display_trials(report)

    print(f"\nMean IS={report.is_mean:.16f}  OOS={report.oos_mean:.16f}  Bias={report.bias:.16f}")
    print(f"\nTotal time: {time.perf_counter() - t0:.2f}s")


if __name__ == "__main__":
    main()
