#!/usr/bin/env python
"""
Camera Rig Inspection Tool.

Loads a rig description, prints the parameters of every camera and checks
the projection model of each camera against a random cloud of 3D points
in the body frame:

    - counts of each projection outcome per camera
    - back-projection round-trip angular error for visible points

Usage:
    # Inspect the example stereo rig
    python scripts/inspect_rig.py --config configs/stereo_rig.yaml

    # Denser sampling, verbose logging
    python scripts/inspect_rig.py --config configs/stereo_rig.yaml --num_points 20000 --log_level DEBUG
"""

import argparse
import sys
from collections import Counter
from pathlib import Path
from typing import Dict

import numpy as np

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from camrig.cameras import NCamera, ProjectionStatus, load_ncamera
from camrig.utils.logger import setup_logger


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Inspect a camera rig configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/stereo_rig.yaml",
        help="Path to rig YAML file (default: configs/stereo_rig.yaml)",
    )
    parser.add_argument(
        "--num_points",
        type=int,
        default=5000,
        help="Number of random body-frame points (default: 5000)",
    )
    parser.add_argument(
        "--min_range",
        type=float,
        default=0.5,
        help="Minimum point distance from the body origin in meters (default: 0.5)",
    )
    parser.add_argument(
        "--max_range",
        type=float,
        default=20.0,
        help="Maximum point distance from the body origin in meters (default: 20.0)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print camera parameters",
    )
    return parser.parse_args(argv)


def sample_points(
    num_points: int,
    min_range: float,
    max_range: float,
    seed: int = 0,
) -> np.ndarray:
    """
    Sample points uniformly in direction and range around the body origin.

    Returns:
        np.ndarray: Points (N, 3) in the body frame.
    """
    rng = np.random.default_rng(seed)
    directions = rng.normal(size=(num_points, 3))
    directions /= np.linalg.norm(directions, axis=1, keepdims=True)
    ranges = rng.uniform(min_range, max_range, size=(num_points, 1))
    return directions * ranges


def inspect_rig(rig: NCamera, points_B: np.ndarray) -> Dict[int, Dict]:
    """
    Project body-frame points into every camera of the rig.

    Args:
        rig: Camera rig.
        points_B: Points (N, 3) in the body frame.

    Returns:
        Per camera index: outcome counts keyed by status name, and the
        maximum back-projection angular error (radians) over visible points.
    """
    report = {}

    for i in range(rig.num_cameras):
        camera = rig.get_camera(i)
        points_C = rig.get_T_C_B(i).transform_points(points_B)

        keypoints, results = camera.project3_vectorized(points_C.T)
        counts = Counter(result.status.name for result in results)

        visible = np.array([result.is_keypoint_visible() for result in results], dtype=bool)
        max_error = 0.0
        failed_back_projections = 0
        if visible.any():
            bearings, success = camera.back_project3_vectorized(keypoints[:, visible])
            failed_back_projections = int(np.count_nonzero(~success))
            expected = points_C[visible].T
            cosines = np.sum(bearings * expected, axis=0) / (
                np.linalg.norm(bearings, axis=0) * np.linalg.norm(expected, axis=0)
            )
            angles = np.arccos(np.clip(cosines[success], -1.0, 1.0))
            max_error = float(angles.max()) if angles.size else 0.0

        report[i] = {
            "label": camera.label,
            "counts": {status.name: counts.get(status.name, 0) for status in ProjectionStatus},
            "failed_back_projections": failed_back_projections,
            "max_round_trip_error_rad": max_error,
        }

    return report


def main(argv=None):
    args = parse_args(argv)
    logger = setup_logger("camrig", level=args.log_level)

    config_path = Path(args.config)
    if not config_path.exists():
        logger.error(f"Config file not found: {config_path}")
        return 1

    rig = load_ncamera(config_path)

    if not args.quiet:
        rig.print_parameters(sys.stdout, f"Rig from {config_path}")

    points_B = sample_points(args.num_points, args.min_range, args.max_range, args.seed)
    logger.info(f"Projecting {len(points_B)} sampled points into {rig.num_cameras} cameras")

    report = inspect_rig(rig, points_B)

    for i, entry in report.items():
        counts = ", ".join(f"{name}={count}" for name, count in entry["counts"].items() if count)
        logger.info(f"Camera {i} ({entry['label']}): {counts}")
        logger.info(
            f"Camera {i} ({entry['label']}): max round-trip error "
            f"{np.degrees(entry['max_round_trip_error_rad']):.2e} deg, "
            f"{entry['failed_back_projections']} failed back-projections"
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
