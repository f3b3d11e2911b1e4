#!/usr/bin/env python3
"""
===============================================================================
QUATLIB - Command Line Entry Point
===============================================================================
Small diagnostic front end over the quaternion algebra, handy for checking a
rotation by hand. Quaternions are given as four floats in x y z w order,
angles on the command line are in degrees.

USAGE:
    quatlib slerp 0 0 0 1  0 0 1 0 --t 0.5      # halfway to 180 deg about Z
    quatlib slerp ... --unclamped --t 1.5       # extrapolate past the end
    quatlib rotate 0 0 0.7071068 0.7071068  1 0 0
    quatlib euler 0 0 0.3826834 0.9238795       # -> yaw pitch roll
    quatlib from-euler 90 0 0                   # yaw pitch roll -> quaternion
    quatlib angle 0 0 0 1  0 0 1 0
    quatlib --config config/quatlib.yaml ...
===============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from quatlib.config import configure_logging, load_config
from quatlib.core.constants import DEG2RAD, RAD2DEG
from quatlib.core.quaternion import Quaternion
from quatlib.core.vector3 import Vector3

logger = logging.getLogger('quatlib.main')

_QUAT_METAVAR = ('X', 'Y', 'Z', 'W')


def _format_values(values, precision: int) -> str:
    return ' '.join(f"{v:+.{precision}f}" for v in values)


def run_slerp(args: argparse.Namespace, precision: int) -> str:
    q_from = Quaternion.from_array(args.q_from)
    q_to = Quaternion.from_array(args.q_to)
    logger.info("Slerp %s -> %s at t=%s (unclamped=%s)",
                q_from, q_to, args.t, args.unclamped)

    if args.unclamped:
        result = Quaternion.slerp_unclamped(q_from, q_to, args.t)
    else:
        result = Quaternion.slerp(q_from, q_to, args.t)
    return _format_values(result, precision)


def run_rotate(args: argparse.Namespace, precision: int) -> str:
    rotation = Quaternion.from_array(args.rotation)
    if not rotation.is_unit():
        logger.warning("Rotation %s is not a unit quaternion (|q|=%.6f)",
                       rotation, rotation.magnitude)
    point = Quaternion.rotate_point(rotation, Vector3.from_array(args.point))
    return _format_values(point, precision)


def run_euler(args: argparse.Namespace, precision: int) -> str:
    angles = Quaternion.from_array(args.q).euler_angles
    return _format_values(np.array(tuple(angles)) * RAD2DEG, precision)


def run_from_euler(args: argparse.Namespace, precision: int) -> str:
    yaw, pitch, roll = (a * DEG2RAD for a in args.angles)
    return _format_values(Quaternion.from_euler(Vector3(yaw, pitch, roll)),
                          precision)


def run_angle(args: argparse.Namespace, precision: int) -> str:
    angle = Quaternion.angle(Quaternion.from_array(args.q_from),
                             Quaternion.from_array(args.q_to))
    return f"{angle:.{precision}f}"


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog='quatlib',
        description='Quaternion rotation algebra from the command line',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Quaternions are x y z w; angles are in degrees.",
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration YAML')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('slerp', help='Spherical interpolation')
    p.add_argument('q_from', nargs=4, type=float, metavar=_QUAT_METAVAR)
    p.add_argument('q_to', nargs=4, type=float, metavar=_QUAT_METAVAR)
    p.add_argument('--t', type=float, default=0.5,
                   help='Interpolation parameter (default: 0.5)')
    p.add_argument('--unclamped', action='store_true',
                   help='Allow t outside [0, 1]')
    p.set_defaults(handler=run_slerp)

    p = sub.add_parser('rotate', help='Rotate a point')
    p.add_argument('rotation', nargs=4, type=float, metavar=_QUAT_METAVAR)
    p.add_argument('point', nargs=3, type=float, metavar=('PX', 'PY', 'PZ'))
    p.set_defaults(handler=run_rotate)

    p = sub.add_parser('euler', help='Quaternion to yaw pitch roll')
    p.add_argument('q', nargs=4, type=float, metavar=_QUAT_METAVAR)
    p.set_defaults(handler=run_euler)

    p = sub.add_parser('from-euler', help='Yaw pitch roll to quaternion')
    p.add_argument('angles', nargs=3, type=float,
                   metavar=('YAW', 'PITCH', 'ROLL'))
    p.set_defaults(handler=run_from_euler)

    p = sub.add_parser('angle', help='Angle between two quaternions')
    p.add_argument('q_from', nargs=4, type=float, metavar=_QUAT_METAVAR)
    p.add_argument('q_to', nargs=4, type=float, metavar=_QUAT_METAVAR)
    p.set_defaults(handler=run_angle)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point. Parses arguments, loads configuration and prints the
    result of the requested operation.
    """
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    configure_logging(config)

    print(args.handler(args, int(config['output']['precision'])))
    return 0


if __name__ == '__main__':
    sys.exit(main())
