#!/usr/bin/env python3
"""
plot_curves.py
Lee el registro diario (SIR_*.csv) y genera la curva epidemica S/I/R en %.
Uso:
    python plot_curves.py SIR_166_037_090_050.csv --out curves.png
"""
import argparse
import os
import sys

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from sir_cell import HealthState

CURVE_COLORS = {
    HealthState.SUSCEPTIBLE: "tab:blue",
    HealthState.INFECTIOUS: "tab:red",
    HealthState.RECOVERED: "tab:green",
}


def load_log(fn):
    df = pd.read_csv(fn)
    df["Day"] = pd.to_numeric(df["Day"], errors="coerce")
    return df.dropna(subset=["Day"]).sort_values("Day")


def plot_curves(df, outfile):
    plt.figure(figsize=(6, 4))
    for state in HealthState:
        col = "%s (%%)" % state.name
        plt.plot(df["Day"], df[col], label=state.name.capitalize(), color=CURVE_COLORS[state])
    plt.xlabel("day")
    plt.ylabel("population (%)")
    plt.ylim(0, 100)
    plt.title("SIR epidemic curve")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(outfile, dpi=200)
    plt.close()
    print("Saved", outfile)


def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("log", help="daily CSV written by seq_sir.py")
    p.add_argument("--out", default="sir_curves.png")
    args = p.parse_args(argv)

    if not os.path.exists(args.log):
        print("Log not found:", args.log)
        return 1
    try:
        df = load_log(args.log)
    except pd.errors.EmptyDataError:
        df = pd.DataFrame()
    if df.empty:
        print("No valid rows in", args.log)
        return 1
    plot_curves(df, args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
