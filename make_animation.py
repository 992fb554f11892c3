#!/usr/bin/env python3
"""
make_animation.py
Genera un GIF a partir de los cuadros diarios guardados por seq_sir.py.
Uso:
    python3 make_animation.py --frames-dir frames_sir --out sir.gif --frame-duration 50
Asume:
    <frames-dir>/sir_day_XXXX.png
"""
import argparse
import glob
import os

import imageio.v3 as iio
import numpy as np
from PIL import Image


def collect_frames(frames_dir):
    paths = sorted(glob.glob(os.path.join(frames_dir, "sir_day_*.png")))
    frames = []
    for path in paths:
        img = Image.open(path).convert("RGB")
        # keep every frame the size of the first one
        if frames and img.size != (frames[0].shape[1], frames[0].shape[0]):
            img = img.resize((frames[0].shape[1], frames[0].shape[0]))
        frames.append(np.asarray(img))
    return frames


def make_animation(frames_dir, outfile, frame_duration=50):
    """Write the frames found in ``frames_dir`` as a looping GIF.

    frame_duration: milliseconds per frame
    Returns the number of frames written.
    """
    frames = collect_frames(frames_dir)
    if not frames:
        print("No frames found in", frames_dir)
        return 0
    iio.imwrite(outfile, np.stack(frames), extension=".gif",
                duration=frame_duration, loop=0)
    print("Saved", outfile)
    return len(frames)


def parse_args(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--frames-dir", default="frames_sir")
    p.add_argument("--out", default="sir.gif")
    p.add_argument("--frame-duration", type=int, default=50, help="ms per frame")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    n = make_animation(args.frames_dir, args.out, args.frame_duration)
    return 0 if n else 1


if __name__ == "__main__":
    raise SystemExit(main())
