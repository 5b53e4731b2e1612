#!/usr/bin/env python3
import os
import sys
from typing import List

from courses import UnknownCourseError, load_catalog, load_schedule, resolve_schedule
from evaluator import RequirementEvaluator
from logger import logger
from report import print_report
from requirements import load_requirement_groups
from settings import Settings, get_settings


def parse_args(argv):
    """Parse and validate command-line arguments.

    Args:
        argv: list of command-line arguments (excluding script name)

    Returns:
        tuple of (schedule_path, requirement_paths)

    Raises:
        ValueError: if arguments are invalid
    """
    if len(argv) < 2:
        raise ValueError(
            "Usage: audit.py <schedule.json> <requirements.json> [<requirements.json> ...]"
        )

    schedule_path, requirement_paths = argv[0], list(argv[1:])

    for path in [schedule_path, *requirement_paths]:
        if not os.path.exists(path):
            raise ValueError(f"{path} does not exist")
        if not os.path.isfile(path):
            raise ValueError(f"{path} must be a file")

    return schedule_path, requirement_paths


def main(schedule_path: str, requirement_paths: List[str], settings: Settings):
    """Audit one schedule against one or more requirement files.

    Raises:
        UnknownCourseError: if the schedule names a course missing from the catalog
        ValueError / FileNotFoundError: on unreadable or malformed input
    """
    logger.info("Loading course catalog")
    catalog = load_catalog(settings.courses_path)

    logger.info(f"Resolving schedule {schedule_path}")
    schedule = resolve_schedule(load_schedule(schedule_path), catalog)

    groups = []
    for path in requirement_paths:
        groups.extend(load_requirement_groups(path))

    evaluator = RequirementEvaluator(groups).run(schedule.stream())
    results = evaluator.results()

    print_report(
        schedule,
        results,
        first_term_limit=settings.first_term_credit_limit,
        term_limit=settings.term_credit_limit,
    )
    return results


if __name__ == "__main__":
    try:
        schedule_path, requirement_paths = parse_args(sys.argv[1:])
        settings = get_settings()
        main(schedule_path, requirement_paths, settings)
    except (ValueError, FileNotFoundError, UnknownCourseError) as e:
        logger.error(str(e))
        sys.exit(1)
