import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

DEFAULT_FIRST_TERM_CREDIT_LIMIT = 17
DEFAULT_TERM_CREDIT_LIMIT = 19


class Settings(BaseModel):
    courses_path: str
    first_term_credit_limit: int = Field(default=DEFAULT_FIRST_TERM_CREDIT_LIMIT, gt=0)
    term_credit_limit: int = Field(default=DEFAULT_TERM_CREDIT_LIMIT, gt=0)


def get_settings(courses_path: Optional[str] = None) -> Settings:
    """Load and validate audit configuration from the environment.

    Args:
        courses_path: overrides COURSES_PATH when given

    Raises:
        ValueError: if COURSES_PATH is missing or a credit limit is invalid
    """
    load_dotenv()
    courses_path = courses_path or os.getenv("COURSES_PATH")
    if not courses_path:
        raise ValueError("Missing COURSES_PATH. Did you set the env?")

    values = {"courses_path": courses_path}
    for field, env_name in (
        ("first_term_credit_limit", "FIRST_TERM_CREDIT_LIMIT"),
        ("term_credit_limit", "TERM_CREDIT_LIMIT"),
    ):
        raw = os.getenv(env_name)
        if raw:
            values[field] = raw

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ValueError(f"Invalid audit configuration: {e}") from e
