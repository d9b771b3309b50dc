"""Example 1 — Training Bias in a Flat Market (Beginner)
========================================================
With no drift the crossover rule has no real edge, so any positive
out-of-sample mean return is noise.  The in-sample figure, measured on the
same path the lookbacks were fitted to, is nonetheless clearly positive:
that gap is the training bias.

Concepts introduced:
  - run_replications() with trend=0.0
  - BiasReport.is_mean / oos_mean / bias
  - per-trial rows in BiasReport.trials (a Polars DataFrame)

Run:
    python examples/01_flat_market_bias.py
    trnbias 0 500 0.0 1000
"""

import polars as pl

from trnbias.bias import run_replications

report = run_replications(criterion=0, ncases=500, trend=0.0, nreps=200)

print(f"Mean IS={report.is_mean:.6f}  OOS={report.oos_mean:.6f}  Bias={report.bias:.6f}")
print(f"({report.nreps} replications in {report.elapsed:.2f}s)")

# ── Which lookbacks does the search keep choosing? ───────────────────────────
popular = (
    report.trials.group_by("short", "long")
    .agg(pl.len().alias("count"), pl.col("is_score").mean().alias("mean_is"))
    .sort("count", descending=True)
    .head(5)
)
print(popular)
