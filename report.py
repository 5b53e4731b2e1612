from itertools import groupby
from typing import List

from courses import Course, ResolvedSchedule
from evaluator import GroupResult
from logger import logger
from settings import DEFAULT_FIRST_TERM_CREDIT_LIMIT, DEFAULT_TERM_CREDIT_LIMIT


def format_course(course: Course) -> str:
    return f'{course.credits} {course.department} {course.number} "{course.name}"'


def format_schedule(
    schedule: ResolvedSchedule,
    first_term_limit=DEFAULT_FIRST_TERM_CREDIT_LIMIT,
    term_limit=DEFAULT_TERM_CREDIT_LIMIT,
) -> List[str]:
    """Render waived credit and each term's courses against its credit ceiling.

    The first scheduled term is held to `first_term_limit`, every later term
    to `term_limit`.
    """
    lines = []
    if schedule.waived:
        lines.append("WAIVED")
        lines.extend(f"\t{format_course(course)}" for course in schedule.waived)

    index = 0
    for year, terms in groupby(schedule.terms, key=lambda term: term.year):
        lines.append(f"YEAR {year}")
        for term in terms:
            limit = first_term_limit if index == 0 else term_limit
            index += 1

            lines.append(f"\t{term.term.upper()}")
            lines.extend(f"\t\t{format_course(course)}" for course in term.courses)
            lines.append(f"\t{term.credits}/{limit}")

            if term.credits > limit:
                logger.warn(
                    f"Year {year} {term.term}: {term.credits} credits exceeds limit of {limit}"
                )
    return lines


def format_results(results: List[GroupResult]) -> List[str]:
    lines = []
    for group in results:
        lines.append(group.name)
        for predicate in group.predicates:
            lines.append(f"{predicate.description} {predicate.satisfied}")
        lines.append("")
    return lines


def print_report(
    schedule: ResolvedSchedule,
    results: List[GroupResult],
    first_term_limit=DEFAULT_FIRST_TERM_CREDIT_LIMIT,
    term_limit=DEFAULT_TERM_CREDIT_LIMIT,
) -> None:
    for line in format_schedule(schedule, first_term_limit, term_limit):
        print(line)
    print()
    for line in format_results(results):
        print(line)

    satisfied = sum(1 for group in results if group.satisfied)
    logger.info(f"{satisfied}/{len(results)} requirement groups fully satisfied")
