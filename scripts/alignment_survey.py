#!/usr/bin/env python3
"""Alignment survey over the synthetic calendar.

Steps the clock through a range of days and counts how often the sun and
moon reach opposition or an eclipse, for a fixed moon phase.
"""

import argparse
from collections import Counter

from domesky.config import get_config
from domesky.dynamics.time_parameters import advance_time, normalize_time_parameters
from domesky.eclipse import AlignmentStatus
from domesky.simulation.sky import compute_sky_state


def survey_alignments(
    start_day: int,
    num_days: int,
    moon_phase_day: float,
    hour_step: float = 0.1,
) -> dict:
    """Evaluate the sky every `hour_step` hours over `num_days` days.

    Args:
        start_day: First day of the survey
        num_days: Number of days to cover
        moon_phase_day: Fixed moon phase
        hour_step: Clock step in hours

    Returns:
        Dictionary with status counts and the closest spot approach
    """
    config = get_config()
    params = normalize_time_parameters(start_day, 0.0, moon_phase_day, config)

    counts: Counter = Counter()
    closest = None
    num_samples = int(round(num_days * config.calendar.hours_per_day / hour_step))

    for _ in range(num_samples):
        sky = compute_sky_state(params, config)
        alignment = sky.alignment
        counts[alignment.status] += 1

        if alignment.spot_distance is not None:
            if closest is None or alignment.spot_distance < closest[1]:
                closest = (params, alignment.spot_distance)

        params = advance_time(params, hour_step, config)

    return {
        "samples": num_samples,
        "counts": {status: counts.get(status, 0) for status in AlignmentStatus},
        "closest": closest,
    }


def print_report(results: dict, moon_phase_day: float) -> None:
    """Print survey report."""
    print("=" * 60)
    print("Alignment Survey Report")
    print("=" * 60)
    print(f"Moon phase day: {moon_phase_day}")
    print(f"Samples: {results['samples']}")
    print()
    for status, count in results["counts"].items():
        share = count / results["samples"] * 100 if results["samples"] else 0.0
        print(f"  {status.value:<16} {count:>7}  ({share:.1f}%)")
    print()

    closest = results["closest"]
    if closest is None:
        print("Bodies never reached the opposition window")
    else:
        params, distance = closest
        print(
            f"Closest spot approach: {distance:.0f} km "
            f"(day {params.day_of_year}, hour {params.hour_of_day:.1f})"
        )


def main():
    parser = argparse.ArgumentParser(description="Survey sun/moon alignments over the calendar")
    parser.add_argument("--start-day", type=int, default=1, help="First day of the survey")
    parser.add_argument("--days", type=int, default=365, help="Number of days to survey")
    parser.add_argument("--moon-phase", type=float, default=15.0, help="Moon phase day")
    parser.add_argument("--hour-step", type=float, default=0.1, help="Clock step (hours)")
    args = parser.parse_args()

    results = survey_alignments(
        start_day=args.start_day,
        num_days=args.days,
        moon_phase_day=args.moon_phase,
        hour_step=args.hour_step,
    )
    print_report(results, args.moon_phase)


if __name__ == "__main__":
    main()
