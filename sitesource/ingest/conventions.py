"""
Path Conventions - Attributes derived from file names and locations

Date-prefixed file names (``2020-05-01-hello-world``) provide a default
title, title path and date. Files under ``posts/`` get categories from their
sub-directories. Explicit attributes always win over derived ones.
"""

import re
from typing import NamedTuple, Optional

from sitesource.ingest.item import Attributes

DATE_FILENAME_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})-(.+)$")

POSTS_DIRECTORY = "posts"


class DateFilename(NamedTuple):
    year: str
    month: str
    day: str
    title_path: str

    @property
    def date(self) -> str:
        return f"{self.year}-{self.month}-{self.day}"

    @property
    def title(self) -> str:
        return self.title_path.replace("-", " ")


def parse_date_filename(filename: str) -> Optional[DateFilename]:
    """Match a filename (extension removed) against yyyy-mm-dd-title."""
    match = DATE_FILENAME_PATTERN.match(filename)
    if not match:
        return None
    return DateFilename(*match.groups())


def apply_filename_convention(attributes: Attributes, filename: str) -> None:
    """Add title_path, title and date for date-prefixed filenames.

    title and date are only set when the attributes don't already have them.
    """
    parsed = parse_date_filename(filename)
    if parsed is None:
        return

    attributes["title_path"] = parsed.title_path
    if "title" not in attributes:
        attributes["title"] = parsed.title
    if "date" not in attributes:
        attributes["date"] = parsed.date


def derive_categories(relative_dir: str) -> Optional[list]:
    """Categories for a content directory, or None outside ``posts/``.

    >>> derive_categories("posts/tech/python")
    ['tech', 'python']
    >>> derive_categories("posts")
    []
    """
    segments = [segment for segment in relative_dir.split("/") if segment]
    if not segments or segments[0] != POSTS_DIRECTORY:
        return None
    return segments[1:]


def apply_categories(attributes: Attributes, relative_dir: str) -> None:
    if "categories" in attributes:
        return

    categories = derive_categories(relative_dir)
    if categories is not None:
        attributes["categories"] = categories
