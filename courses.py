from __future__ import annotations
import json
from typing import Dict, FrozenSet, Iterator, List, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from logger import logger


class Course(BaseModel):
    """One completed or placed course, as produced by the catalog."""

    model_config = ConfigDict(frozen=True)

    department: str = Field(validation_alias=AliasChoices("department", "dep"))
    number: int = Field(ge=0)
    name: str = ""
    credits: Union[int, float] = 0
    distribution_tags: FrozenSet[str] = Field(
        default=frozenset(),
        validation_alias=AliasChoices("distribution_tags", "sbcs"),
    )

    @field_validator("credits")
    @classmethod
    def credits_not_negative(cls, value):
        if value < 0:
            raise ValueError(f"credits must be non-negative, got {value}")
        return value

    @property
    def identifier(self) -> str:
        return f"{self.department} {self.number}"

    @property
    def is_null(self) -> bool:
        return (
            self.department == ""
            and self.number == 0
            and self.name == ""
            and self.credits == 0
            and not self.distribution_tags
        )


# Evaluation probe. Never counts as evidence for any predicate.
NULL_COURSE = Course(department="", number=0, name="", credits=0)


class UnknownCourseError(LookupError):
    """A schedule references course identifiers missing from the catalog."""

    def __init__(self, identifiers: List[str]):
        self.identifiers = identifiers
        super().__init__(f"Unknown course(s): {', '.join(identifiers)}")


class Term(BaseModel):
    year: int
    term: str
    courses: List[str] = []


class Schedule(BaseModel):
    waived: List[Course] = []
    terms: List[Term] = []


class ResolvedTerm(BaseModel):
    year: int
    term: str
    courses: List[Course]

    @property
    def credits(self) -> float:
        return sum(course.credits for course in self.courses)


class ResolvedSchedule(BaseModel):
    waived: List[Course]
    terms: List[ResolvedTerm]

    def stream(self) -> Iterator[Course]:
        """Yield every course in academic order, waived credit first."""
        yield from self.waived
        for term in self.terms:
            yield from term.courses


def load_json(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data
    except FileNotFoundError as e:
        raise FileNotFoundError(f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse {path} as JSON: {e}") from e


def parse_catalog(raw) -> Dict[str, Course]:
    """Validate a raw identifier -> record mapping into Course records.

    Raises:
        ValueError: if the mapping or any record is malformed
    """
    if not isinstance(raw, dict):
        raise ValueError("Course catalog must be a JSON object keyed by course code")

    catalog = {}
    for code, record in raw.items():
        try:
            course = Course.model_validate(record)
        except ValidationError as e:
            raise ValueError(f"Invalid course record for {code}: {e}") from e
        if course.identifier != code:
            logger.warn(f"Catalog key '{code}' does not match record {course.identifier}")
        catalog[code] = course
    return catalog


def load_catalog(path) -> Dict[str, Course]:
    catalog = parse_catalog(load_json(path))
    logger.info(f"Loaded {len(catalog)} courses from {path}")
    return catalog


def load_schedule(path) -> Schedule:
    try:
        return Schedule.model_validate(load_json(path))
    except ValidationError as e:
        raise ValueError(f"Invalid schedule in {path}: {e}") from e


def resolve_schedule(schedule: Schedule, catalog: Dict[str, Course]) -> ResolvedSchedule:
    """Look up every scheduled identifier in the catalog.

    Resolution happens before any course reaches a predicate, so an unknown
    identifier never leaves requirement state partially updated.

    Raises:
        UnknownCourseError: listing every identifier absent from the catalog
    """
    missing = []
    terms = []
    for term in schedule.terms:
        resolved = []
        for code in term.courses:
            course = catalog.get(code)
            if course is None:
                logger.error(f"Course not found in catalog: {code}")
                missing.append(code)
                continue
            resolved.append(course)
        terms.append(ResolvedTerm(year=term.year, term=term.term, courses=resolved))

    if missing:
        raise UnknownCourseError(missing)

    return ResolvedSchedule(waived=list(schedule.waived), terms=terms)
