"""
mutations.py - Filename Mutations

Each mutation is one enable-flagged transform with a total
``mutate(input, entry=None) -> str`` contract: it never raises, and a
disabled mutation returns its input unchanged.

Contains:
- Mutation: Abstract base
- RegexMutation, ReplaceMutation, CaseMutation, RemoveMutation,
  AddMutation, AutoDateMutation, NumberingMutation
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, Optional

from loguru import logger
from unidecode import unidecode

from .models_fs import Entry
from .mutation_config import (
    AddConfig, AutoDateConfig, CaseConfig, CaseType, DatePosition, DateType,
    NumberingConfig, NumberingMode, RegexConfig, RemoveConfig, ReplaceConfig,
)
from .text_case import (
    to_lower_camel_case, to_shouty_kebab_case, to_shouty_snake_case,
    to_snake_case, to_title_case, to_train_case, to_upper_camel_case,
)
from .text_match import (
    map_stem, replace_text, split_filename,
)


class Mutation(ABC):
    """Single named, enable-flagged text transform"""

    name = "mutation"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    @abstractmethod
    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        """Return the transformed name (never raises)"""

    def reset(self) -> None:
        """Reset per-run state (only stateful mutations override this)"""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(enabled={self.enabled})"


# $1, ${1}, $name, ${name}, $$
_TEMPLATE_RE = re.compile(r"\$(?:\$|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")


def expand_substitution(template: str, match: "re.Match") -> str:
    """
    Expand a $-style substitution template for one match

    Group references that do not exist expand to an empty string;
    backslashes are taken literally.
    """
    def group_value(ref: str) -> str:
        try:
            key = int(ref) if ref.isdigit() else ref
            return match.group(key) or ""
        except IndexError:
            return ""

    def repl(m: "re.Match") -> str:
        if m.group(0) == "$$":
            return "$"
        return group_value(m.group(1) or m.group(2))

    return _TEMPLATE_RE.sub(repl, template)


class RegexMutation(Mutation):
    """Regular expression substitution on the stem (or the whole name)"""

    name = "regex"

    def __init__(self, config: RegexConfig):
        super().__init__(config.enabled)
        self.config = config
        self.compiled: Optional["re.Pattern"] = None
        self.pattern_error: Optional[str] = None

        if config.enabled and config.pattern:
            try:
                self.compiled = re.compile(config.pattern)
            except re.error as e:
                self.pattern_error = str(e)
                logger.warning(f"Regex mutation disabled, invalid pattern {config.pattern!r}: {e}")

    @property
    def is_active(self) -> bool:
        return self.compiled is not None

    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        if self.compiled is None:
            if self.pattern_error is None:
                logger.debug(
                    f"Regex not applied (enabled={self.enabled}, pattern length={len(self.config.pattern)})"
                )
            return input

        filename, extension = split_filename(input)
        target = input if self.config.including_extension else filename
        template = self.config.substitution
        replaced = self.compiled.sub(lambda m: expand_substitution(template, m), target)

        if not self.config.including_extension:
            # Re-appended even when there was no extension: ".bashrc" -> "X."
            return f"{replaced}.{extension}"
        return replaced


class ReplaceMutation(Mutation):
    """Literal find/replace on the stem"""

    name = "replace"

    def __init__(self, config: ReplaceConfig):
        super().__init__(config.enabled)
        self.config = config

    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        if not self.enabled or not self.config.match:
            return input
        cfg = self.config
        return map_stem(input, lambda stem: replace_text(
            stem, cfg.match, cfg.replace_with, cfg.case_sensitive, count=1 if cfg.first_only else 0,
        ))


CASE_FUNCTIONS: Dict[CaseType, Callable[[str], str]] = {
    CaseType.NONE: lambda s: s,
    CaseType.LOWER_CAMEL: to_lower_camel_case,
    CaseType.UPPER_CAMEL: to_upper_camel_case,
    CaseType.SHOUTY_KEBAB: to_shouty_kebab_case,
    CaseType.SHOUTY_SNAKE: to_shouty_snake_case,
    CaseType.SNAKE: to_snake_case,
    CaseType.TITLE: to_title_case,
    CaseType.KEBAB: to_train_case,
    CaseType.UPPER: str.upper,
    CaseType.LOWER: str.lower,
}


class CaseMutation(Mutation):
    """Letter case conversion of the entire name, extension included"""

    name = "case"

    def __init__(self, config: CaseConfig):
        super().__init__(config.enabled)
        self.config = config

    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        if not self.enabled:
            return input
        return CASE_FUNCTIONS[self.config.case_type](input)


class RemoveMutation(Mutation):
    """Character, range, word and class removal on the stem"""

    name = "remove"

    def __init__(self, config: RemoveConfig):
        super().__init__(config.enabled)
        self.config = config
        self._words_re: Optional["re.Pattern"] = None
        if config.words:
            alternatives = "|".join(re.escape(w) for w in sorted(config.words, key=len, reverse=True))
            self._words_re = re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)")

    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        if not self.enabled:
            return input
        return map_stem(input, self._remove)

    def _remove(self, stem: str) -> str:
        cfg = self.config
        if cfg.first_n:
            stem = stem[cfg.first_n:]
        if cfg.last_n:
            stem = stem[:-cfg.last_n] if cfg.last_n < len(stem) else ""
        if cfg.has_range:
            start = cfg.from_pos - 1
            end = cfg.to_pos if cfg.to_pos else len(stem)
            stem = stem[:start] + stem[end:]
        if cfg.chars:
            stem = "".join(ch for ch in stem if ch not in cfg.chars)
        if self._words_re is not None:
            stem = self._words_re.sub("", stem)
        if cfg.digits:
            stem = re.sub(r"\d", "", stem)
        if cfg.accents:
            stem = unidecode(stem)
        if cfg.trim:
            stem = stem.strip()
        return stem


class AddMutation(Mutation):
    """Prefix, suffix and positional insertion on the stem"""

    name = "add"

    def __init__(self, config: AddConfig):
        super().__init__(config.enabled)
        self.config = config

    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        if not self.enabled:
            return input
        return map_stem(input, self._add)

    def _add(self, stem: str) -> str:
        cfg = self.config
        if cfg.insert:
            pos = cfg.at_position
            if pos < 0:
                pos = max(0, len(stem) + pos)
            else:
                pos = min(pos, len(stem))
            stem = stem[:pos] + cfg.insert + stem[pos:]

        space = " " if cfg.word_space else ""
        if cfg.prefix:
            stem = f"{cfg.prefix}{space}{stem}"
        if cfg.suffix:
            stem = f"{stem}{space}{cfg.suffix}"
        return stem


class AutoDateMutation(Mutation):
    """Prefix or suffix the stem with a formatted timestamp"""

    name = "auto_date"

    def __init__(self, config: AutoDateConfig, clock: Callable[[], datetime] = datetime.now):
        super().__init__(config.enabled)
        self.config = config
        self.clock = clock

    def _timestamp(self, entry: Optional[Entry]) -> Optional[datetime]:
        if self.config.date_type == DateType.CURRENT:
            return self.clock()
        if entry is None:
            return None
        if self.config.date_type == DateType.CREATED:
            return entry.created_at
        return entry.modified_at

    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        if not self.enabled:
            return input

        stamp = self._timestamp(entry)
        if stamp is None:
            logger.debug(f"No {self.config.date_type.value} timestamp for {input!r}, date not added")
            return input
        if stamp.tzinfo is not None:
            stamp = stamp.astimezone()

        try:
            text = stamp.strftime(self.config.date_format)
        except ValueError as e:
            logger.warning(f"Cannot format date with {self.config.date_format!r}: {e}")
            return input

        sep = self.config.separator
        if self.config.position == DatePosition.PREFIX:
            return map_stem(input, lambda stem: f"{text}{sep}{stem}")
        return map_stem(input, lambda stem: f"{stem}{sep}{text}")


DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def format_number(value: int, base: int = 10, pad: int = 0, uppercase: bool = False) -> str:
    """
    Render an integer in the given base

    Args:
        value: Number
        base: 2..36
        pad: Zero-pad width (sign not counted)
        uppercase: Use A-Z for digits above 9

    Returns:
        Rendered number
    """
    negative = value < 0
    value = abs(value)
    out = []
    while True:
        value, rem = divmod(value, base)
        out.append(DIGITS[rem])
        if value == 0:
            break
    text = "".join(reversed(out)).zfill(pad)
    if uppercase:
        text = text.upper()
    return f"-{text}" if negative else text


class NumberingMutation(Mutation):
    """Sequential numbering; the counter advances once per mutated name"""

    name = "numbering"

    def __init__(self, config: NumberingConfig):
        super().__init__(config.enabled)
        self.config = config
        self._count = 0

    def reset(self) -> None:
        self._count = 0

    def next_number(self) -> int:
        cfg = self.config
        index = self._count % cfg.break_after if cfg.break_after else self._count
        self._count += 1
        return cfg.start + index * cfg.increment

    def mutate(self, input: str, entry: Optional[Entry] = None) -> str:
        cfg = self.config
        if not self.enabled or cfg.mode == NumberingMode.NONE:
            return input

        number = format_number(self.next_number(), cfg.base, cfg.pad, cfg.uppercase)
        return map_stem(input, lambda stem: self._place(number, stem))

    def _place(self, number: str, stem: str) -> str:
        cfg = self.config
        sep = cfg.separator
        if cfg.mode == NumberingMode.PREFIX:
            return f"{number}{sep}{stem}"
        if cfg.mode == NumberingMode.SUFFIX:
            return f"{stem}{sep}{number}"
        if cfg.mode == NumberingMode.PREFIX_SUFFIX:
            return f"{number}{sep}{stem}{sep}{number}"
        pos = cfg.at_position
        pos = max(0, len(stem) + pos) if pos < 0 else min(pos, len(stem))
        return stem[:pos] + number + stem[pos:]
