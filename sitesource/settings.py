"""
Data source settings and configuration resolution.

Two layers live here:

- SourceSettings loads ingestion parameters from environment variables
  (.env file supported) with the stock site defaults.
- DataSourceConfig is the validated, immutable parameter set consumed by the
  walker, the attribute extractor and the item assembler. resolve_config()
  builds it from a plain mapping and reports problems as ConfigurationError.
"""

import os
import re
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Pattern, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sitesource.exceptions import ConfigurationError

# Load .env file if present
load_dotenv()

SUPPORTED_ATTRIBUTE_SYNTAXES = ("yaml", "json")

DEFAULT_TEXT_EXTENSIONS = (
    "htm,html,html.twig,twig.html,twig,js,less,markdown,md,mkd,mkdn,coffee,css,"
    "erb,haml,handlebars,hb,ms,mustache,php,rb,sass,scss,slim,txt,xhtml,xml"
)


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


# An exclude entry written as `/pattern/flags` is a regular expression
REGEX_ENTRY_PATTERN = re.compile(r"^/(?P<pattern>.+)/(?P<flags>[imsx]*)$", re.DOTALL)
REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def compile_regex_entry(entry: str) -> Optional[Pattern]:
    """Compile a `/pattern/flags` exclude entry. Plain entries give None.

    Raises:
        re.error: If the entry is delimited like a regex but does not compile
    """
    match = REGEX_ENTRY_PATTERN.match(entry.strip())
    if not match:
        return None
    flags = 0
    for flag in match.group("flags"):
        flags |= REGEX_FLAGS[flag]
    return re.compile(match.group("pattern"), flags)


class DataSourceConfig(BaseModel):
    """Validated ingestion parameters."""

    source_root: str = Field(
        ..., description="Directory holding content/, layouts/ and includes/"
    )
    include: List[str] = Field(
        default_factory=list,
        description="Files or directories forced into the content scan",
    )
    exclude: List[str] = Field(
        default_factory=list,
        description="Path fragments, /regex/ or glob patterns dropped from the content scan",
    )
    text_extensions: FrozenSet[str] = Field(
        ..., description="Extensions read as text; anything else is binary"
    )
    attribute_syntax: str = Field(
        default="yaml", description="Syntax of sidecar and frontmatter documents"
    )
    timezone: str = Field(default="UTC", description="Timezone used for mtime")
    ignore_dot_files: bool = Field(
        default=False, description="Skip dot files and dot directories while walking"
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # Unknown parameters are typos
    )

    @field_validator("source_root")
    def validate_source_root(cls, v):
        if not v or not v.strip():
            raise ValueError("source_root must not be empty")
        return os.path.normpath(v)

    @field_validator("include", "exclude", mode="before")
    def coerce_path_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("exclude")
    def validate_exclude_patterns(cls, v):
        for entry in v:
            try:
                compile_regex_entry(entry)
            except re.error as e:
                raise ValueError(f"Invalid exclude pattern '{entry}': {e}")
        return v

    @field_validator("text_extensions", mode="before")
    def normalize_text_extensions(cls, v):
        if isinstance(v, str):
            v = _split_csv(v)
        if v is None:
            v = []
        normalized = {
            str(ext).strip().lower().lstrip(".") for ext in v if str(ext).strip()
        }
        normalized.discard("")
        if not normalized:
            raise ValueError("text_extensions must not be empty")
        return frozenset(normalized)

    @field_validator("attribute_syntax")
    def validate_attribute_syntax(cls, v):
        v = v.strip().lower()
        if v not in SUPPORTED_ATTRIBUTE_SYNTAXES:
            raise ValueError(
                f"attribute_syntax must be one of {', '.join(SUPPORTED_ATTRIBUTE_SYNTAXES)}"
            )
        return v

    @field_validator("timezone")
    def validate_timezone(cls, v):
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{v}'")
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def resolve_config(
    params: Optional[Union[Mapping[str, Any], DataSourceConfig]],
) -> DataSourceConfig:
    """Validate raw ingestion parameters.

    Args:
        params: Mapping of option name to value, or an already resolved config

    Returns:
        Immutable DataSourceConfig

    Raises:
        ConfigurationError: If a required option is missing or a value is invalid
    """
    if isinstance(params, DataSourceConfig):
        return params

    try:
        return DataSourceConfig(**dict(params or {}))
    except ValidationError as e:
        problems = []
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or "params"
            problems.append(f"{location}: {error['msg']}")
        raise ConfigurationError(
            "Invalid data source configuration: " + "; ".join(problems)
        ) from e
    except TypeError as e:
        raise ConfigurationError(f"Invalid data source configuration: {e}") from e


class SourceSettings(BaseModel):
    """Ingestion parameters loaded from the environment."""

    source_root: str = Field(
        default=os.getenv("SOURCE_ROOT", "src"),
        description="Site source directory",
    )
    include: List[str] = Field(
        default_factory=lambda: _split_csv(os.getenv("SOURCE_INCLUDE", ".htaccess")),
        description="Paths force-included in the content scan",
    )
    exclude: List[str] = Field(
        default_factory=lambda: _split_csv(os.getenv("SOURCE_EXCLUDE", "")),
        description="Paths force-excluded from the content scan",
    )
    text_extensions: List[str] = Field(
        default_factory=lambda: _split_csv(
            os.getenv("SOURCE_TEXT_EXTENSIONS", DEFAULT_TEXT_EXTENSIONS)
        ),
        description="Extensions read as text",
    )
    attribute_syntax: str = Field(
        default=os.getenv("SOURCE_ATTRIBUTE_SYNTAX", "yaml"),
        description="Syntax for attributes: yaml or json",
    )
    timezone: str = Field(
        default=os.getenv("SOURCE_TIMEZONE", "UTC"),
        description="Timezone used to format mtime",
    )
    ignore_dot_files: bool = Field(
        default=os.getenv("SOURCE_IGNORE_DOT_FILES", "true").lower() == "true",
        description="Skip dot files unless explicitly included",
    )

    model_config = ConfigDict(validate_assignment=True)

    def as_params(self) -> Dict[str, Any]:
        """Return the parameter mapping accepted by resolve_config()."""
        return self.model_dump()


# Global settings instance
settings = SourceSettings()
