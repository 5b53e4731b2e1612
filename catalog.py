#!/usr/bin/env python3
# catalog.py: Builds the course catalog JSON consumed by audit.py from
# department bulletin pages, either saved HTML files or fetched by URL.

import os
import re
import sys
import json
from typing import Dict, Iterable, List, Set

import requests
from bs4 import BeautifulSoup
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from courses import Course, load_json
from logger import logger

CREDITS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*credits?", re.IGNORECASE)

# Headings read "CSE 114: Introduction to ..."; the title follows the code
NAME_PREFIX_LENGTH = 9

DEPARTMENT_PLACEHOLDER = "{department}"


def parse_credits(text: str):
    """Return the credit value stated in a course's credit line.

    Raises:
        ValueError: if no credit value is present
    """
    match = CREDITS_PATTERN.search(text or "")
    if not match:
        raise ValueError(f"No credit value in: {text!r}")
    value = float(match.group(1))
    return int(value) if value.is_integer() else value


def parse_department_page(html: str, department: str, known_tags: Set[str]) -> Dict[str, Course]:
    soup = BeautifulSoup(html, "html.parser")
    container = soup.find(class_="column_2_text")
    if container is None:
        logger.warn(f"No course listing found for department {department}")
        return {}

    courses = {}
    for element in container.find_all(class_="course"):
        number = element.get("id", "")
        heading = element.find("h3")
        paragraphs = element.find_all("p")

        if not number.isdigit() or heading is None or not paragraphs:
            logger.warn(f"Skipping malformed course entry in {department}: id={number!r}")
            continue

        try:
            credits = parse_credits(paragraphs[-1].get_text())
        except ValueError as e:
            logger.warn(f"Skipping {department} {number}: {e}")
            continue

        tags = {
            anchor.get_text(strip=True)
            for anchor in element.find_all("a")
            if anchor.get_text(strip=True) in known_tags
        }
        course = Course(
            department=department,
            number=int(number),
            name=heading.get_text()[NAME_PREFIX_LENGTH:].strip(),
            credits=credits,
            distribution_tags=tags,
        )
        courses[course.identifier] = course

    logger.debug(f"Parsed {len(courses)} courses for {department}")
    return courses


@retry(
    retry=retry_if_exception_type(requests.RequestException),
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=1, max=16),
    reraise=True,
)
def fetch_department_page(url: str, **kwargs) -> str:
    """Fetch a department page with retry logic and return its HTML."""
    resp = requests.get(url, timeout=30, **kwargs)
    resp.raise_for_status()
    return resp.text


def build_catalog(html_dir, known_tags: Set[str]) -> Dict[str, Course]:
    """Parse every saved department page in `html_dir`.

    The department code is the first three letters of the file name.
    """
    catalog = {}
    for file in sorted(os.listdir(html_dir)):
        department = file[:3].upper()
        with open(os.path.join(html_dir, file), "r", encoding="utf-8") as f:
            catalog.update(parse_department_page(f.read(), department, known_tags))
    logger.info(f"Parsed {len(catalog)} courses from {html_dir}")
    return catalog


def fetch_catalog(url_template: str, departments: Iterable[str], known_tags: Set[str]) -> Dict[str, Course]:
    catalog = {}
    for department in departments:
        department = department.upper()
        url = url_template.replace(DEPARTMENT_PLACEHOLDER, department.lower())
        logger.info(f"Fetching {department} from {url}")
        catalog.update(parse_department_page(fetch_department_page(url), department, known_tags))
    return catalog


def load_known_tags(path) -> Set[str]:
    tags = load_json(path)
    if not isinstance(tags, list):
        raise ValueError(f"{path} must contain a JSON array of tag codes")
    return set(tags)


def serialize_catalog(catalog: Dict[str, Course]) -> dict:
    return {
        code: {
            "department": course.department,
            "number": course.number,
            "name": course.name,
            "credits": course.credits,
            "distribution_tags": sorted(course.distribution_tags),
        }
        for code, course in catalog.items()
    }


def save_catalog(path, catalog: Dict[str, Course]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_catalog(catalog), f, ensure_ascii=False, indent=4)
    logger.info(f"Saved {len(catalog)} courses to {path}")


def parse_args(argv: List[str]):
    """Parse and validate command-line arguments.

    Returns:
        tuple of (tags_path, output_path, source, departments)

    Raises:
        ValueError: if arguments are invalid
    """
    if len(argv) < 3:
        raise ValueError(
            "Usage: catalog.py <tags.json> <output.json> <html-dir | url-template DEPT [DEPT ...]>"
        )

    tags_path, output_path, source = argv[0], argv[1], argv[2]
    departments = argv[3:]

    if DEPARTMENT_PLACEHOLDER in source:
        if not departments:
            raise ValueError("A URL template needs at least one department code")
    elif not os.path.isdir(source):
        raise ValueError(f"{source} must be a directory of department pages")

    return tags_path, output_path, source, departments


def main(argv: List[str]) -> None:
    tags_path, output_path, source, departments = parse_args(argv)
    known_tags = load_known_tags(tags_path)

    if departments:
        catalog = fetch_catalog(source, departments, known_tags)
    else:
        catalog = build_catalog(source, known_tags)

    save_catalog(output_path, catalog)


if __name__ == "__main__":
    try:
        main(sys.argv[1:])
    except (ValueError, OSError, requests.RequestException) as e:
        logger.error(str(e))
        sys.exit(1)
