import pytest

from courses import NULL_COURSE
from predicates import (
    and_,
    has_distribution_tag,
    in_department,
    is_course,
    is_upper_division,
    minimum_credits,
    n_out_of_list,
)


def feed(predicate, courses):
    return [predicate.evaluate(course) for course in courses]


def test_true_when_running_total_reaches_threshold(make_course):
    predicate = minimum_credits(12)
    courses = [make_course(number=n, credits=c) for n, c in [(101, 3), (102, 4), (103, 3), (104, 2)]]
    assert feed(predicate, courses) == [False, False, False, True]
    assert predicate.total == 12


def test_transition_moment_depends_on_order(make_course):
    predicate = minimum_credits(12)
    courses = [make_course(number=n, credits=c) for n, c in [(104, 2), (103, 3), (102, 4), (101, 3)]]
    assert feed(predicate, courses) == [False, False, False, True]


def test_describe_reports_progress(make_course):
    predicate = minimum_credits(120)
    predicate.evaluate(make_course(credits=4))
    predicate.evaluate(make_course(number=214, credits=4))
    assert predicate.describe() == "Minimum credits: 8/120 for any course"


def test_same_record_fed_twice_counts_twice(make_course):
    predicate = minimum_credits(6)
    course = make_course(credits=3)
    assert not predicate.evaluate(course)
    assert predicate.evaluate(course)


def test_filter_is_applied_per_course(make_course):
    predicate = minimum_credits(6, is_upper_division())
    predicate.evaluate(make_course(number=310, credits=3))
    # Lower-division courses never count, even after an upper-division one
    predicate.evaluate(make_course(number=114, credits=4))
    predicate.evaluate(make_course(number=214, credits=4))
    assert predicate.total == 3
    assert not predicate.satisfied

    predicate.evaluate(make_course(number=320, credits=3))
    assert predicate.satisfied
    assert predicate.describe() == "Minimum credits: 6/6 for upper division"


def test_compound_filter(make_course):
    predicate = minimum_credits(6, and_(is_upper_division(), in_department("CSE")))
    predicate.evaluate(make_course(department="AMS", number=301, credits=3))
    predicate.evaluate(make_course(department="CSE", number=214, credits=4))
    predicate.evaluate(make_course(department="CSE", number=373, credits=3))
    assert predicate.total == 3


def test_fractional_credits(make_course):
    predicate = minimum_credits(1)
    predicate.evaluate(make_course(credits=0.5))
    assert not predicate.satisfied
    predicate.evaluate(make_course(number=115, credits=0.5))
    assert predicate.satisfied


def test_null_course_adds_nothing(make_course):
    predicate = minimum_credits(3)
    predicate.evaluate(make_course(credits=2))
    assert not predicate.evaluate(NULL_COURSE)
    assert predicate.total == 2


def test_negative_threshold_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        minimum_credits(-1)


def test_choose_n_filter_counts_the_course_that_credits_an_option(make_course):
    predicate = minimum_credits(3, n_out_of_list(1, [is_course("CSE 114")]))
    assert predicate.evaluate(make_course(number=114, credits=3))
    assert predicate.total == 3


def test_choose_n_filter_keeps_counting_credited_options(make_course):
    predicate = minimum_credits(
        6, n_out_of_list(2, [has_distribution_tag("HUM"), has_distribution_tag("ARTS")])
    )
    predicate.evaluate(make_course(department="PHI", number=100, credits=3, tags=("HUM",)))
    predicate.evaluate(make_course(department="CSE", number=214, credits=4))
    predicate.evaluate(make_course(department="ARS", number=154, credits=3, tags=("ARTS",)))

    assert predicate.total == 6
    assert predicate.describe() == (
        "Minimum credits: 6/6 for 2 out of has HUM (True), has ARTS (True)"
    )

    # An option already credited still marks later courses as matching
    predicate.evaluate(make_course(department="PHI", number=104, credits=3, tags=("HUM",)))
    assert predicate.total == 9
