"""
mutation_config.py - Mutation Configuration

One immutable record per transform kind, aggregated in MutationConfig.
Records validate themselves on construction (ConfigError), so a pipeline
built from a MutationConfig never sees malformed options.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from .errors import ConfigError


class CaseType(Enum):
    """Letter case variants"""
    NONE = "none"
    LOWER_CAMEL = "lower_camel"
    UPPER_CAMEL = "upper_camel"
    SHOUTY_KEBAB = "shouty_kebab"
    SHOUTY_SNAKE = "shouty_snake"
    SNAKE = "snake"
    TITLE = "title"
    KEBAB = "kebab"          # Rendered as Train-Case
    UPPER = "upper"
    LOWER = "lower"

    @property
    def label(self) -> str:
        return CASE_LABELS[self]


CASE_LABELS = {
    CaseType.NONE: "None",
    CaseType.LOWER_CAMEL: "lowerCamelCase",
    CaseType.UPPER_CAMEL: "UpperCamelCase",
    CaseType.SHOUTY_KEBAB: "SHOUTY-KEBAB-CASE",
    CaseType.SHOUTY_SNAKE: "SHOUTY_SNAKE_CASE",
    CaseType.SNAKE: "snake_case",
    CaseType.TITLE: "Title Case",
    CaseType.KEBAB: "kebab-case",
    CaseType.UPPER: "UPPER CASE",
    CaseType.LOWER: "lower case",
}


class DateType(Enum):
    """Which timestamp Auto Date uses"""
    CREATED = "created"
    MODIFIED = "modified"
    CURRENT = "current"


class DatePosition(Enum):
    """Where Auto Date puts the timestamp"""
    PREFIX = "prefix"
    SUFFIX = "suffix"


class NumberingMode(Enum):
    """Where Numbering puts the number"""
    NONE = "none"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    PREFIX_SUFFIX = "prefix_suffix"
    INSERT = "insert"


def _enum_by_name_or_value(enum_cls: Type[Enum], value: Any) -> Any:
    """Accept a member, its value or its name (any case); anything else is left for pydantic to reject"""
    if isinstance(value, enum_cls) or not isinstance(value, str):
        return value
    text = value.strip().lower()
    for member in enum_cls:
        if text in (member.value.lower(), member.name.lower()):
            return member
    return value


def config_error(error: ValidationError, where: str = "") -> ConfigError:
    """First pydantic error as a ConfigError naming the offending field"""
    first = error.errors()[0]
    loc = [str(part) for part in first["loc"]]
    field_name = loc[-1] if loc else None
    location = ".".join(loc) or where
    return ConfigError(f"Invalid {location}: {first['msg']}", field=field_name)


class _Record(BaseModel):
    """Frozen, closed record; construction errors surface as ConfigError"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise config_error(e, type(self).__name__) from None


class RegexConfig(_Record):
    enabled: bool = True
    pattern: str = ""
    substitution: str = ""
    including_extension: bool = False


class ReplaceConfig(_Record):
    enabled: bool = False
    match: str = ""
    replace_with: str = ""
    case_sensitive: bool = False
    first_only: bool = False


class CaseConfig(_Record):
    enabled: bool = False
    case_type: CaseType = CaseType.NONE

    @field_validator("case_type", mode="before")
    @classmethod
    def _case_by_name(cls, value: Any) -> Any:
        return _enum_by_name_or_value(CaseType, value)


class RemoveConfig(_Record):
    """
    Removal options, applied in this order:
    first_n, last_n, range (from_pos..to_pos), chars, words, digits, accents, trim
    """
    enabled: bool = False
    first_n: int = Field(default=0, ge=0)
    last_n: int = Field(default=0, ge=0)
    from_pos: int = Field(default=0, ge=0)     # 1-based, inclusive; 0 disables the range
    to_pos: int = Field(default=0, ge=0)
    chars: str = ""
    words: Tuple[str, ...] = ()
    digits: bool = False
    accents: bool = False
    trim: bool = False

    @field_validator("words", mode="before")
    @classmethod
    def _split_words(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(value.split())
        if isinstance(value, (list, tuple)):
            return tuple(w for w in value if w)
        return value

    @field_validator("to_pos")
    @classmethod
    def _range_in_order(cls, to_pos: int, info: ValidationInfo) -> int:
        from_pos = info.data.get("from_pos", 0)
        if from_pos and to_pos and to_pos < from_pos:
            raise ValueError(f"range end ({to_pos}) is before start ({from_pos})")
        return to_pos

    @property
    def has_range(self) -> bool:
        return self.from_pos > 0


class AddConfig(_Record):
    enabled: bool = False
    prefix: str = ""
    insert: str = ""
    at_position: int = 0            # 0-based, negative counts from the end
    suffix: str = ""
    word_space: bool = False


class AutoDateConfig(_Record):
    enabled: bool = False
    date_type: DateType = DateType.MODIFIED
    position: DatePosition = DatePosition.SUFFIX
    date_format: str = Field(default="%Y-%m-%d", min_length=1)
    separator: str = "_"

    @field_validator("date_type", mode="before")
    @classmethod
    def _date_type_by_name(cls, value: Any) -> Any:
        return _enum_by_name_or_value(DateType, value)

    @field_validator("position", mode="before")
    @classmethod
    def _position_by_name(cls, value: Any) -> Any:
        return _enum_by_name_or_value(DatePosition, value)


class NumberingConfig(_Record):
    enabled: bool = False
    mode: NumberingMode = NumberingMode.SUFFIX
    at_position: int = 0
    start: int = 1
    increment: int = 1
    pad: int = Field(default=0, ge=0)
    separator: str = "_"
    break_after: int = Field(default=0, ge=0)   # Reset to start after this many names; 0 = never
    base: int = Field(default=10, ge=2, le=36)
    uppercase: bool = False

    @field_validator("mode", mode="before")
    @classmethod
    def _mode_by_name(cls, value: Any) -> Any:
        return _enum_by_name_or_value(NumberingMode, value)

    @field_validator("increment")
    @classmethod
    def _nonzero_increment(cls, increment: int) -> int:
        if increment == 0:
            raise ValueError("increment cannot be zero")
        return increment


class MutationConfig(_Record):
    """Immutable snapshot of every mutation's configuration"""
    regex: RegexConfig = Field(default_factory=RegexConfig)
    replace: ReplaceConfig = Field(default_factory=ReplaceConfig)
    case: CaseConfig = Field(default_factory=CaseConfig)
    remove: RemoveConfig = Field(default_factory=RemoveConfig)
    add: AddConfig = Field(default_factory=AddConfig)
    auto_date: AutoDateConfig = Field(default_factory=AutoDateConfig)
    numbering: NumberingConfig = Field(default_factory=NumberingConfig)

    def with_section(self, name: str, **changes) -> "MutationConfig":
        """Return a copy with one section's fields changed (validated)"""
        section_cls = SECTIONS.get(name)
        if section_cls is None:
            raise ConfigError(f"Unknown mutation section: {name}", field=name)
        section = section_cls(**{**getattr(self, name).model_dump(), **changes})
        return self.model_copy(update={name: section})


# section name -> record class, in pipeline order
SECTIONS: Dict[str, Type[_Record]] = {
    name: info.annotation for name, info in MutationConfig.model_fields.items()
}


def parse_mutation_config(data: Any) -> MutationConfig:
    """
    Validate plain data (e.g. parsed JSON) into a MutationConfig

    Missing sections and fields take their defaults; enum fields accept
    either the value or the member name.

    Raises:
        ConfigError: Unknown section/field or invalid value
    """
    try:
        return MutationConfig.model_validate(data)
    except ValidationError as e:
        raise config_error(e, "configuration") from None


def parse_form_int(text: Optional[str], field_name: str, default: int = 0, minimum: Optional[int] = None) -> int:
    """
    Parse a free-text numeric form field

    Args:
        text: Raw field text
        field_name: Field name for error messages
        default: Value used for a blank field
        minimum: Smallest accepted value

    Returns:
        Parsed integer

    Raises:
        ConfigError: Text is not an integer or is below minimum
    """
    if text is None or not str(text).strip():
        return default
    try:
        value = int(str(text).strip())
    except ValueError:
        raise ConfigError(f"{field_name} must be an integer: {text!r}", field=field_name) from None
    if minimum is not None and value < minimum:
        raise ConfigError(f"{field_name} cannot be less than {minimum}: {value}", field=field_name)
    return value


def load_mutation_config(path: Union[str, Path]) -> MutationConfig:
    """
    Load mutation configuration from a JSON file

    Raises:
        ConfigError: File unreadable, not JSON, or invalid values
    """
    path = Path(path)
    logger.info(f"Loading mutation configuration from: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load mutation configuration {path}: {e}")
        raise ConfigError(f"Cannot load configuration {path}: {e}") from e
    try:
        return MutationConfig.model_validate(data)
    except ValidationError as e:
        logger.error(f"Mutation configuration validation failed: {e}")
        raise config_error(e, str(path)) from None
