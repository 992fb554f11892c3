"""
sir_vis.py
Cuadros PNG de la grilla SIR, uno por dia, con el titulo
"Day d, S: x%, I: y%, R: z%".
Colores: S=blanco, I=rojo, R=verde, estado desconocido=gris claro.
"""
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from sir_cell import HealthState

FRAME_PATTERN = "sir_day_%04d.png"

STATE_COLORS = np.array([
    [255, 255, 255],  # SUSCEPTIBLE
    [255, 0, 0],      # INFECTIOUS
    [0, 255, 0],      # RECOVERED
    [192, 192, 192],  # unknown
], dtype=np.uint8)


def to_rgb(snapshot):
    """Map an n x n array of state codes to an n x n x 3 uint8 image."""
    codes = np.asarray(snapshot, dtype=np.int64)
    unknown = len(HealthState)
    codes = np.where((codes >= 0) & (codes < unknown), codes, unknown)
    return STATE_COLORS[codes]


def caption(day, percentages):
    s, i, r = percentages
    return "Day %d, S: %.2f%%, I: %.2f%%, R: %.2f%%" % (day, s, i, r)


class FrameRecorder:
    """Saves one captioned PNG per day under ``out_dir``."""

    def __init__(self, out_dir, dpi=100):
        self.out_dir = out_dir
        self.dpi = dpi
        self.paths = []
        os.makedirs(out_dir, exist_ok=True)

    def update(self, day, snapshot, percentages):
        path = os.path.join(self.out_dir, FRAME_PATTERN % day)
        fig = plt.figure(figsize=(6, 6))
        plt.imshow(to_rgb(snapshot), interpolation="nearest")
        plt.title(caption(day, percentages))
        plt.axis("off")
        plt.tight_layout()
        fig.savefig(path, dpi=self.dpi)
        plt.close(fig)
        self.paths.append(path)
        return path
