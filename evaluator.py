from typing import Iterable, List

from pydantic import BaseModel
from courses import Course
from logger import logger
from requirements import RequirementGroup


class PredicateResult(BaseModel):
    description: str
    satisfied: bool


class GroupResult(BaseModel):
    name: str
    predicates: List[PredicateResult]

    @property
    def satisfied(self) -> bool:
        return all(result.satisfied for result in self.predicates)


class RequirementEvaluator:
    """Streams courses through every predicate of every requirement group.

    Courses are fed in stream order; within a course, groups and their
    predicates are visited in declaration order. Each course gets a fresh step
    token, so a predicate shared between groups or combinators folds the
    course in once.
    """

    def __init__(self, groups: Iterable[RequirementGroup]):
        self.groups = list(groups)
        self.courses_seen = 0

    def feed(self, course: Course) -> None:
        # Unique per course, even across evaluators sharing predicates
        step = object()
        self.courses_seen += 1
        for group in self.groups:
            for predicate in group:
                predicate.evaluate(course, step)

    def run(self, courses: Iterable[Course]) -> "RequirementEvaluator":
        for course in courses:
            self.feed(course)
        logger.info(
            f"Evaluated {self.courses_seen} courses against {len(self.groups)} requirement groups"
        )
        return self

    def results(self) -> List[GroupResult]:
        """Read every predicate's state without adding evidence."""
        return [
            GroupResult(
                name=group.name,
                predicates=[
                    PredicateResult(
                        description=predicate.describe(),
                        satisfied=predicate.satisfied,
                    )
                    for predicate in group
                ],
            )
            for group in self.groups
        ]


def evaluate_requirements(
    courses: Iterable[Course], groups: Iterable[RequirementGroup]
) -> List[GroupResult]:
    return RequirementEvaluator(groups).run(courses).results()
