#!/usr/bin/env python3
"""
seq_sir.py
Simulacion secuencial SIR en grilla 2D (automata celular, vecindario Moore).
Uso:
    python3 seq_sir.py --infection-rate 0.13 --recovery-rate 0.33 --max-days 90 --size 50
Opciones:
    --density: fraccion inicial de infectados (por defecto 0.1)
    --masked-fraction: fraccion de la poblacion con mascarilla
    --seed: semilla aleatoria para reproducibilidad
    --stop-on-stasis: detenerse el primer dia sin cambios de estado
Salida:
    - SIR_<inf>_<rec>_<dias>_<n>.csv  (totales y porcentajes por dia)
    - frames_sir/sir_day_%04d.png  (opcional: --save-frames)
    - sir.gif  (opcional: --animation, requiere --save-frames)
"""
import argparse
import time

import numpy as np

from make_animation import make_animation
from sir_grid import Grid
from sir_vis import FrameRecorder
from sir_writer import DailyLogWriter

DEFAULTS = dict(
    infection_rate=0.166,
    recovery_rate=0.037,
    max_days=90,
    size=50,
    frame_duration=50,
    density=0.1,
)


def probability(text):
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError("%r is not a number" % text)
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError("%r is not in [0, 1]" % text)
    return value


def positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError("%r is not an integer" % text)
    if value <= 0:
        raise argparse.ArgumentTypeError("%r must be positive" % text)
    return value


def non_negative_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError("%r is not an integer" % text)
    if value < 0:
        raise argparse.ArgumentTypeError("%r must not be negative" % text)
    return value


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="SIR cellular automaton on an n x n grid")
    p.add_argument("--infection-rate", type=probability, default=DEFAULTS["infection_rate"],
                   help="prob. de contagio por vecino infeccioso por dia")
    p.add_argument("--recovery-rate", type=probability, default=DEFAULTS["recovery_rate"],
                   help="prob. de recuperacion por dia")
    p.add_argument("--max-days", type=positive_int, default=DEFAULTS["max_days"])
    p.add_argument("--size", type=positive_int, default=DEFAULTS["size"],
                   help="tamano de la grilla (n x n)")
    p.add_argument("--frame-duration", type=non_negative_int, default=DEFAULTS["frame_duration"],
                   help="ms por cuadro en la animacion")
    p.add_argument("--density", type=probability, default=DEFAULTS["density"],
                   help="fraccion inicial de infectados")
    p.add_argument("--masked-fraction", type=probability, default=0.0)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--output", default=None, help="CSV de salida (nombre automatico si se omite)")
    p.add_argument("--save-frames", action="store_true")
    p.add_argument("--frames-dir", default="frames_sir")
    p.add_argument("--animation", default=None, help="GIF de salida (requiere --save-frames)")
    p.add_argument("--stop-on-stasis", action="store_true")
    return p.parse_args(argv)


def simulate(args):
    """Run one simulation; returns a list of (day, counts, percentages)."""
    grid = Grid(args.size, rng=np.random.default_rng(args.seed))
    grid.populate(args.density, args.infection_rate, args.recovery_rate,
                  masked_fraction=args.masked_fraction)

    recorder = FrameRecorder(args.frames_dir) if args.save_frames else None
    if recorder is not None:
        recorder.update(0, grid.snapshot(), grid.percentages())

    records = []
    with DailyLogWriter(args.output) as writer:
        writer.open(args.max_days, args.infection_rate, args.recovery_rate, args.size)
        for day in range(1, args.max_days + 1):
            counts = grid.update()
            pct = grid.percentages()
            records.append((day, counts, pct))
            writer.update(day, counts, pct)
            if recorder is not None:
                recorder.update(day, grid.snapshot(), pct)
            # small progress
            if day % 10 == 0:
                s, i, r = counts
                print(f"[sir] day {day:4d}  S={s} I={i} R={r} flux={grid.changed_count}")
            if args.stop_on_stasis and grid.changed_count == 0:
                print(f"[sir] stasis reached on day {day}")
                break

    if recorder is not None and args.animation:
        make_animation(args.frames_dir, args.animation, args.frame_duration)
    return records


def main(argv=None):
    args = parse_args(argv)
    t0 = time.time()
    records = simulate(args)
    print("Finished SIR run: %d days, time(s) = %.3f" % (len(records), time.time() - t0))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
