import pytest

from courses import NULL_COURSE
from predicates import (
    any_course,
    has_distribution_tag,
    in_department,
    is_course,
    is_upper_division,
    minimum_credits,
)


def test_any_course_is_immediately_true():
    predicate = any_course()
    assert predicate.satisfied
    assert predicate.evaluate(NULL_COURSE)
    assert predicate.describe() == "any course"


def test_upper_division_latches(make_course):
    predicate = is_upper_division()
    assert not predicate.evaluate(make_course(number=114))
    assert predicate.evaluate(make_course(number=300))
    assert predicate.evaluate(make_course(number=101))
    assert predicate.describe() == "upper division"


def test_in_department(make_course):
    predicate = in_department("AMS")
    assert not predicate.evaluate(make_course(department="CSE"))
    assert predicate.evaluate(make_course(department="AMS", number=210))
    assert predicate.describe() == "AMS course"


def test_has_distribution_tag(make_course):
    predicate = has_distribution_tag("WRT")
    assert not predicate.evaluate(make_course(tags={"TECH"}))
    assert predicate.evaluate(make_course(department="WRT", number=102, tags={"WRT", "HUM"}))
    assert predicate.describe() == "has WRT"


def test_is_course_exact_match(make_course):
    predicate = is_course("CSE 214")
    assert not predicate.evaluate(make_course(department="CSE", number=2140))
    assert not predicate.evaluate(make_course(department="CSEE", number=214))
    assert predicate.evaluate(make_course(department="CSE", number=214))
    assert predicate.describe() == "is CSE 214"


@pytest.mark.parametrize(
    "build",
    [
        is_upper_division,
        lambda: in_department("CSE"),
        lambda: in_department(""),
        lambda: has_distribution_tag("QPS"),
        lambda: is_course("CSE 114"),
        lambda: is_course(" 0"),
        lambda: minimum_credits(3),
    ],
)
def test_null_course_never_satisfies_fresh_predicate(build):
    predicate = build()
    assert predicate.evaluate(NULL_COURSE) is False


@pytest.mark.parametrize(
    "build, satisfying",
    [
        (is_upper_division, {"number": 416}),
        (lambda: in_department("AMS"), {"department": "AMS"}),
        (lambda: has_distribution_tag("GLO"), {"tags": {"GLO"}}),
        (lambda: is_course("CSE 114"), {"department": "CSE", "number": 114}),
    ],
)
def test_truth_is_sticky(make_course, build, satisfying):
    predicate = build()
    assert predicate.evaluate(make_course(**satisfying))
    for course in [make_course(department="PHY", number=131), NULL_COURSE]:
        assert predicate.evaluate(course)
