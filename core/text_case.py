"""
text_case.py - Letter Case Conversion

Word-boundary aware case conversion (snake_case, Title Case, ...).

Words are found by splitting on every non-alphanumeric character and then
inside each piece:
- between a lowercase letter and a following uppercase letter ("myFile" -> my|File)
- before the last capital of an acronym followed by lowercase ("XMLFile" -> XML|File)
Digits never start a new word on their own.
"""

from typing import Callable, List


def split_words(text: str) -> List[str]:
    """
    Split text into words

    Args:
        text: Input text

    Returns:
        Non-empty words in order
    """
    words: List[str] = []

    piece = []
    pieces: List[str] = []
    for ch in text:
        if ch.isalnum():
            piece.append(ch)
        else:
            pieces.append("".join(piece))
            piece = []
    pieces.append("".join(piece))

    for part in pieces:
        if not part:
            continue
        start = 0
        mode = None  # None = boundary, "lower", "upper"
        for i, ch in enumerate(part):
            if i + 1 >= len(part):
                words.append(part[start:])
                break
            nxt = part[i + 1]
            if ch.islower():
                next_mode = "lower"
            elif ch.isupper():
                next_mode = "upper"
            else:
                next_mode = mode

            if next_mode == "lower" and nxt.isupper():
                words.append(part[start:i + 1])
                start = i + 1
                mode = None
            elif mode == "upper" and ch.isupper() and nxt.islower():
                words.append(part[start:i])
                start = i
                mode = None
            else:
                mode = next_mode

    return [w for w in words if w]


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _join(text: str, sep: str, first: Callable[[str], str], rest: Callable[[str], str]) -> str:
    words = split_words(text)
    if not words:
        return ""
    return sep.join([first(words[0])] + [rest(w) for w in words[1:]])


def to_snake_case(text: str) -> str:
    return _join(text, "_", str.lower, str.lower)


def to_shouty_snake_case(text: str) -> str:
    return _join(text, "_", str.upper, str.upper)


def to_kebab_case(text: str) -> str:
    return _join(text, "-", str.lower, str.lower)


def to_shouty_kebab_case(text: str) -> str:
    return _join(text, "-", str.upper, str.upper)


def to_train_case(text: str) -> str:
    return _join(text, "-", _capitalize, _capitalize)


def to_title_case(text: str) -> str:
    return _join(text, " ", _capitalize, _capitalize)


def to_upper_camel_case(text: str) -> str:
    return _join(text, "", _capitalize, _capitalize)


def to_lower_camel_case(text: str) -> str:
    return _join(text, "", str.lower, _capitalize)
