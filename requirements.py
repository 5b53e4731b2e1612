from __future__ import annotations
from enum import Enum
from typing import Annotated, Iterable, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator
from courses import load_json
from logger import logger
from predicates import (
    CoursePredicate,
    and_,
    any_course,
    has_distribution_tag,
    in_department,
    is_course,
    is_upper_division,
    lecture_with_lab,
    minimum_credits,
    n_out_of_list,
    named,
    or_,
)


class RequirementType(str, Enum):
    ANY = "ANY"
    UPPER_DIVISION = "UPPER_DIVISION"
    DEPARTMENT = "DEPARTMENT"
    TAG = "TAG"
    COURSE = "COURSE"
    LECTURE_LAB = "LECTURE_LAB"
    MIN_CREDITS = "MIN_CREDITS"
    AND = "AND"
    OR = "OR"
    CHOOSE_N = "CHOOSE_N"


class BaseRequirement(BaseModel):
    label: Optional[str] = None


class AnyRequirement(BaseRequirement):
    type: Literal[RequirementType.ANY] = RequirementType.ANY


class UpperDivisionRequirement(BaseRequirement):
    type: Literal[RequirementType.UPPER_DIVISION] = RequirementType.UPPER_DIVISION


class DepartmentRequirement(BaseRequirement):
    type: Literal[RequirementType.DEPARTMENT] = RequirementType.DEPARTMENT
    department: str


class TagRequirement(BaseRequirement):
    type: Literal[RequirementType.TAG] = RequirementType.TAG
    tag: str


class CourseRequirement(BaseRequirement):
    type: Literal[RequirementType.COURSE] = RequirementType.COURSE
    course: str


class LectureLabRequirement(BaseRequirement):
    type: Literal[RequirementType.LECTURE_LAB] = RequirementType.LECTURE_LAB
    department: str
    lecture: int
    lab: int


class MinCreditsRequirement(BaseRequirement):
    type: Literal[RequirementType.MIN_CREDITS] = RequirementType.MIN_CREDITS
    credits: Union[int, float]
    filter: Optional[Requirement] = None

    @field_validator("credits")
    @classmethod
    def credits_not_negative(cls, value):
        if value < 0:
            raise ValueError(f"credits must be non-negative, got {value}")
        return value


class AndRequirement(BaseRequirement):
    type: Literal[RequirementType.AND] = RequirementType.AND
    requirements: List[Requirement] = Field(min_length=2)


class OrRequirement(BaseRequirement):
    type: Literal[RequirementType.OR] = RequirementType.OR
    requirements: List[Requirement] = Field(min_length=2)


class ChooseNRequirement(BaseRequirement):
    type: Literal[RequirementType.CHOOSE_N] = RequirementType.CHOOSE_N
    choose: int = Field(ge=0)
    requirements: List[Requirement] = Field(min_length=1)


Requirement = Annotated[
    Union[
        AnyRequirement,
        UpperDivisionRequirement,
        DepartmentRequirement,
        TagRequirement,
        CourseRequirement,
        LectureLabRequirement,
        MinCreditsRequirement,
        AndRequirement,
        OrRequirement,
        ChooseNRequirement,
    ],
    Field(discriminator="type"),
]


class GroupDeclaration(BaseModel):
    name: str
    requirements: List[Requirement]


class RequirementDeclarations(BaseModel):
    groups: List[GroupDeclaration]


for _model in (MinCreditsRequirement, AndRequirement, OrRequirement, ChooseNRequirement):
    _model.model_rebuild()
GroupDeclaration.model_rebuild()
RequirementDeclarations.model_rebuild()


class RequirementGroup:
    """A named, ordered collection of predicates for one degree requirement.

    The group itself has no truth value in the report; `satisfied` is the
    all-true reduction for callers that need a single answer.
    """

    def __init__(self, name: str, predicates: Iterable[CoursePredicate]):
        self.name = name
        self.predicates = list(predicates)

    def __iter__(self) -> Iterator[CoursePredicate]:
        return iter(self.predicates)

    def __len__(self):
        return len(self.predicates)

    @property
    def satisfied(self) -> bool:
        return all(predicate.satisfied for predicate in self.predicates)


def make_group(name: str, *predicates: CoursePredicate) -> RequirementGroup:
    return RequirementGroup(name, predicates)


def build_predicate(req: Requirement) -> CoursePredicate:
    """Instantiate a fresh predicate tree for a declared requirement."""
    match req.type:
        case RequirementType.ANY:
            predicate = any_course()
        case RequirementType.UPPER_DIVISION:
            predicate = is_upper_division()
        case RequirementType.DEPARTMENT:
            predicate = in_department(req.department)
        case RequirementType.TAG:
            predicate = has_distribution_tag(req.tag)
        case RequirementType.COURSE:
            predicate = is_course(req.course)
        case RequirementType.LECTURE_LAB:
            predicate = lecture_with_lab(req.department, req.lecture, req.lab)
        case RequirementType.MIN_CREDITS:
            course_filter = build_predicate(req.filter) if req.filter else None
            predicate = minimum_credits(req.credits, course_filter)
        case RequirementType.AND:
            children = [build_predicate(child) for child in req.requirements]
            predicate = children[0]
            for child in children[1:]:
                predicate = and_(predicate, child)
        case RequirementType.OR:
            children = [build_predicate(child) for child in req.requirements]
            predicate = or_(*children)
        case RequirementType.CHOOSE_N:
            if req.choose > len(req.requirements):
                logger.warn(
                    f"CHOOSE_N asks for {req.choose} of {len(req.requirements)} options and can never be met"
                )
            predicate = n_out_of_list(
                req.choose, [build_predicate(child) for child in req.requirements]
            )
        case t:
            raise ValueError(f"Unknown RequirementType {t}")

    if req.label:
        predicate = named(predicate, req.label)
    return predicate


def parse_requirement_groups(raw) -> List[RequirementGroup]:
    """Validate raw requirement declarations and build their groups.

    Raises:
        ValueError: if the declarations do not match the requirement schema
    """
    try:
        declarations = RequirementDeclarations.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid requirement declarations: {e}") from e

    return [
        RequirementGroup(
            group.name, [build_predicate(req) for req in group.requirements]
        )
        for group in declarations.groups
    ]


def load_requirement_groups(path) -> List[RequirementGroup]:
    raw = load_json(path)
    try:
        groups = parse_requirement_groups(raw)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e
    logger.info(f"Loaded {len(groups)} requirement groups from {path}")
    return groups
