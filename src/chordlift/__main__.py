#!/usr/bin/env python3
"""
Headless command line front end for chordlift.

Usage:
    python -m chordlift demo [--points N] [--seed S] [--ticks T] [--dt D]
                             [--surface-stl FILE] [--band-stl FILE] [--ascii]

Examples:
    # Play 600 frames at 60 fps on a reproducible random loop
    python -m chordlift demo --seed 7 --ticks 600 --dt 0.016667

    # Also export the lift surface and the half-twist band
    python -m chordlift demo --seed 7 --res-a 120 --res-b 120 \
        --surface-stl surface.stl --band-stl band.stl
"""

import argparse
import logging
import random
import sys

from chordlift.band import tessellate_band
from chordlift.config import SessionConfig
from chordlift.errors import ChordLiftError
from chordlift.io import write_stl
from chordlift.logging_config import setup_logging
from chordlift.session import Session


def cmd_demo(args) -> int:
    """Generate a random loop, animate it and report the result."""

    config = SessionConfig(
        speed_a=args.speed_a,
        speed_b=args.speed_b,
        res_a=args.res_a,
        res_b=args.res_b,
        show_surface=bool(args.surface_stl),
    )
    session = Session(config)
    rng = random.Random(args.seed)

    try:
        curve = session.generate_random_loop(args.points, args.radius, rng)
        session.set_playing(True)
        frame = None
        for _ in range(args.ticks):
            frame = session.update(args.dt)
        if frame is None:
            frame = session.update(0.0)

        lifted = frame.sample.lifted_point
        print(f"loop: {len(curve.control_points)} points, length {curve.length:.4f}")
        print(f"a = {session.config.a:.6f}  b = {session.config.b:.6f}")
        print(f"chord = {frame.sample.chord_length:.6f}  "
              f"lifted = ({lifted[0]:.4f}, {lifted[1]:.4f}, {lifted[2]:.4f})")
        print(f"trail: {len(frame.trail)} points")

        if args.surface_stl:
            count = write_stl(frame.surface, args.surface_stl, binary=not args.ascii,
                              name='chordlift surface')
            print(f"surface: {frame.surface.vertex_count} vertices, "
                  f"{count} facets -> {args.surface_stl}")
        if args.band_stl:
            band = tessellate_band(curve)
            count = write_stl(band, args.band_stl, binary=not args.ascii,
                              name='chordlift band')
            print(f"band: {band.vertex_count} vertices, {count} facets -> {args.band_stl}")
    except ChordLiftError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='chordlift',
        description='Closed-curve chord-lift geometry',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    demo = subparsers.add_parser('demo', help='Animate a random loop headlessly')
    demo.add_argument('--points', type=int, default=10, help='Control points in the loop')
    demo.add_argument('--radius', type=float, default=4.0, help='Base loop radius')
    demo.add_argument('--seed', type=int, default=None, help='Random seed')
    demo.add_argument('--ticks', type=int, default=600, help='Frames to play')
    demo.add_argument('--dt', type=float, default=1.0 / 60.0, help='Seconds per frame')
    demo.add_argument('--speed-a', type=float, default=0.18, help='Cycles per second for a')
    demo.add_argument('--speed-b', type=float, default=0.23, help='Cycles per second for b')
    demo.add_argument('--res-a', type=int, default=400, help='Surface resolution along a')
    demo.add_argument('--res-b', type=int, default=400, help='Surface resolution along b')
    demo.add_argument('--surface-stl', metavar='FILE', help='Write the lift surface to FILE')
    demo.add_argument('--band-stl', metavar='FILE', help='Write the half-twist band to FILE')
    demo.add_argument('--ascii', action='store_true', help='Write ASCII rather than binary STL')
    demo.set_defaults(func=cmd_demo)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
