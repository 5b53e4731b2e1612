"""Stateful course predicates and the combinators that compose them.

A predicate watches a stream of courses and accumulates evidence. Calling
``evaluate(course)`` records whatever the course contributes and returns the
accumulated truth value, which never goes from true back to false.

Predicates may be shared between combinators and requirement groups. The
evaluation driver passes a ``step`` token with each course; an instance that
has already seen a step answers from its current state instead of counting the
course a second time.
"""

from functools import reduce
from typing import Hashable, Iterable, List, Optional, Union

from courses import Course

UPPER_DIVISION_MINIMUM = 300

Credits = Union[int, float]


class CoursePredicate:
    def __init__(self):
        self._last_step: Optional[Hashable] = None

    def evaluate(self, course: Course, step: Optional[Hashable] = None) -> bool:
        if course.is_null:
            return self.satisfied
        if step is not None:
            if step == self._last_step:
                return self.satisfied
            self._last_step = step
        self.observe(course, step)
        return self.satisfied

    def __call__(self, course: Course, step: Optional[Hashable] = None) -> bool:
        return self.evaluate(course, step)

    def observe(self, course: Course, step: Optional[Hashable]) -> None:
        """Fold one course into the accumulated state."""
        raise NotImplementedError

    def matches(self, course: Course) -> bool:
        """Whether this course, on its own, meets the condition."""
        raise NotImplementedError

    @property
    def satisfied(self) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.describe()!r} {self.satisfied}>"


class CourseLatch(CoursePredicate):
    """Becomes true on the first matching course and stays true."""

    def __init__(self):
        super().__init__()
        self._fulfilled = False

    def observe(self, course, step):
        if self.matches(course):
            self._fulfilled = True

    @property
    def satisfied(self):
        return self._fulfilled


class AnyCourse(CoursePredicate):
    def observe(self, course, step):
        pass

    def matches(self, course):
        return True

    @property
    def satisfied(self):
        return True

    def describe(self):
        return "any course"


class UpperDivision(CourseLatch):
    def matches(self, course):
        return course.number >= UPPER_DIVISION_MINIMUM

    def describe(self):
        return "upper division"


class InDepartment(CourseLatch):
    def __init__(self, department: str):
        super().__init__()
        self.department = department

    def matches(self, course):
        return course.department == self.department

    def describe(self):
        return f"{self.department} course"


class HasDistributionTag(CourseLatch):
    def __init__(self, tag: str):
        super().__init__()
        self.tag = tag

    def matches(self, course):
        return self.tag in course.distribution_tags

    def describe(self):
        return f"has {self.tag}"


class IsCourse(CourseLatch):
    def __init__(self, identifier: str):
        super().__init__()
        self.identifier = identifier

    def matches(self, course):
        # Exact match: "CSE 214" must not match CSE 2140
        return course.identifier == self.identifier

    def describe(self):
        return f"is {self.identifier}"


class MinimumCredits(CoursePredicate):
    """Running credit total over the courses the filter matches.

    The filter is asked about each course individually. Its own latch only
    says whether some earlier course matched, which is not what decides if
    this course's credits count.
    """

    def __init__(self, threshold: Credits, course_filter: CoursePredicate):
        super().__init__()
        if threshold < 0:
            raise ValueError(f"Credit threshold must be non-negative, got {threshold}")
        self.threshold = threshold
        self.course_filter = course_filter
        self.total: Credits = 0

    def observe(self, course, step):
        self.course_filter.evaluate(course, step)
        if self.course_filter.matches(course):
            self.total += course.credits

    def matches(self, course):
        return self.course_filter.matches(course)

    @property
    def satisfied(self):
        return self.total >= self.threshold

    def describe(self):
        return (
            f"Minimum credits: {self.total}/{self.threshold} "
            f"for {self.course_filter.describe()}"
        )


class And(CoursePredicate):
    """Both sides must have been true at some point, not necessarily together."""

    def __init__(self, a: CoursePredicate, b: CoursePredicate):
        super().__init__()
        self.a = a
        self.b = b
        self.a_fulfilled = False
        self.b_fulfilled = False

    def observe(self, course, step):
        # Both sides see every course so their own state stays current
        if self.a.evaluate(course, step):
            self.a_fulfilled = True
        if self.b.evaluate(course, step):
            self.b_fulfilled = True

    def matches(self, course):
        return self.a.matches(course) and self.b.matches(course)

    @property
    def satisfied(self):
        return self.a_fulfilled and self.b_fulfilled

    def describe(self):
        return (
            f"{self.a.describe()} ({self.a_fulfilled}) and "
            f"{self.b.describe()} ({self.b_fulfilled})"
        )


class Or(CoursePredicate):
    def __init__(self, a: CoursePredicate, b: CoursePredicate):
        super().__init__()
        self.a = a
        self.b = b
        self.a_fulfilled = False
        self.b_fulfilled = False

    def observe(self, course, step):
        if self.a.evaluate(course, step):
            self.a_fulfilled = True
        if self.b.evaluate(course, step):
            self.b_fulfilled = True

    def matches(self, course):
        return self.a.matches(course) or self.b.matches(course)

    @property
    def satisfied(self):
        return self.a_fulfilled or self.b_fulfilled

    def describe(self):
        return (
            f"{self.a.describe()} ({self.a_fulfilled}) or "
            f"{self.b.describe()} ({self.b_fulfilled})"
        )


class NOutOfList(CoursePredicate):
    """At least ``n`` distinct predicates from the list have become true.

    Each predicate is credited once, on the course where it first turns true.
    Several predicates turning true on the same course are all credited in
    that step.
    """

    def __init__(self, n: int, predicates: Iterable[CoursePredicate]):
        super().__init__()
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        self.n = n
        # The same instance listed twice is still one requirement slot
        self.predicates: List[CoursePredicate] = list(dict.fromkeys(predicates))
        self.credited: List[CoursePredicate] = []

    @property
    def remaining(self) -> List[CoursePredicate]:
        return [p for p in self.predicates if p not in self.credited]

    def observe(self, course, step):
        newly_true = [
            predicate
            for predicate in self.predicates
            if predicate.evaluate(course, step) and predicate not in self.credited
        ]
        self.credited.extend(newly_true)

    def matches(self, course):
        return any(predicate.matches(course) for predicate in self.predicates)

    @property
    def satisfied(self):
        return len(self.credited) >= self.n

    def describe(self):
        options = ", ".join(
            f"{predicate.describe()} ({predicate in self.credited})"
            for predicate in self.predicates
        )
        return f"{self.n} out of {options}"


class Named(CoursePredicate):
    """Reports a fixed label in place of the wrapped predicate's description."""

    def __init__(self, predicate: CoursePredicate, label: str):
        super().__init__()
        self.predicate = predicate
        self.label = label

    def observe(self, course, step):
        self.predicate.evaluate(course, step)

    def matches(self, course):
        return self.predicate.matches(course)

    @property
    def satisfied(self):
        return self.predicate.satisfied

    def describe(self):
        return self.label


def any_course() -> CoursePredicate:
    return AnyCourse()


def is_upper_division() -> CoursePredicate:
    return UpperDivision()


def in_department(department: str) -> CoursePredicate:
    return InDepartment(department)


def has_distribution_tag(tag: str) -> CoursePredicate:
    return HasDistributionTag(tag)


def is_course(identifier: str) -> CoursePredicate:
    return IsCourse(identifier)


def minimum_credits(
    threshold: Credits, course_filter: Optional[CoursePredicate] = None
) -> CoursePredicate:
    if course_filter is None:
        course_filter = any_course()
    return MinimumCredits(threshold, course_filter)


def and_(a: CoursePredicate, b: CoursePredicate) -> CoursePredicate:
    return And(a, b)


def or_(a: CoursePredicate, b: CoursePredicate, *more: CoursePredicate) -> CoursePredicate:
    """or_(a, b, c) is or_(or_(a, b), c)."""
    return reduce(Or, more, Or(a, b))


def n_out_of_list(n: int, predicates: Iterable[CoursePredicate]) -> CoursePredicate:
    return NOutOfList(n, predicates)


def named(predicate: CoursePredicate, label: str) -> CoursePredicate:
    return Named(predicate, label)


def lecture_with_lab(department: str, lecture: int, lab: int) -> CoursePredicate:
    return and_(is_course(f"{department} {lecture}"), is_course(f"{department} {lab}"))
