"""
text_match.py - Text Matching Tools

Provides string matching, replacement and case tools used by the rename rules
"""

import re


SPECIAL_CHARS_RE = re.compile(r"[^A-Za-z0-9 \-_]")
WHITESPACE_RE = re.compile(r"\s+")
CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")
KEBAB_SEPARATOR_RE = re.compile(r"[\s_]+")


def contains(text: str, keyword: str, case_sensitive: bool = True) -> bool:
    """
    Check if text contains keyword

    Args:
        text: Text to check
        keyword: Keyword
        case_sensitive: Whether case-sensitive

    Returns:
        Whether contains
    """
    if not keyword:
        return True

    if case_sensitive:
        return keyword in text
    else:
        return keyword.lower() in text.lower()


def replace_text(text: str, old: str, new: str, case_sensitive: bool = True) -> str:
    """
    Replace every occurrence of a literal string

    Args:
        text: Original text
        old: String to replace (literal, never a pattern)
        new: Replacement string (literal)
        case_sensitive: Whether case-sensitive

    Returns:
        Replaced text
    """
    if not old:
        return text

    if case_sensitive:
        return text.replace(old, new)
    else:
        pattern = re.compile(re.escape(old), re.IGNORECASE)
        return pattern.sub(lambda m: new, text)


def regex_replace(text: str, pattern: str, new: str, flags: str = "g") -> str:
    """
    Replace matches of a user-supplied regular expression

    Args:
        text: Original text
        pattern: Regular expression
        new: Replacement template (\\1, \\g<name>)
        flags: "g" replaces all matches (otherwise only the first), "i" ignores case

    Returns:
        Replaced text

    Raises:
        re.error: Invalid pattern or replacement template
    """
    re_flags = re.IGNORECASE if "i" in flags else 0
    if "m" in flags:
        re_flags |= re.MULTILINE
    compiled = re.compile(pattern, re_flags)
    return compiled.sub(new, text, count=0 if "g" in flags else 1)


def remove_special_chars(text: str) -> str:
    """Keep letters, digits, space, hyphen and underscore"""
    return SPECIAL_CHARS_RE.sub("", text)


def normalize_space(text: str) -> str:
    """Collapse whitespace runs to a single space"""
    return WHITESPACE_RE.sub(" ", text)


def to_kebab_case(text: str) -> str:
    """
    Convert to kebab-case

    "MyHoliday photo_2" -> "my-holiday-photo-2"
    """
    text = CAMEL_BOUNDARY_RE.sub(r"\1-\2", text)
    return KEBAB_SEPARATOR_RE.sub("-", text).lower()


def format_number(n: int, padding: int = 1) -> str:
    """
    Zero-pad a number (never truncates)

    Args:
        n: Number
        padding: Minimum digit count

    Returns:
        Padded decimal string
    """
    return str(n).zfill(max(padding, 1))


RESERVED_NAMES = {
    'CON', 'PRN', 'AUX', 'NUL',
    'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
    'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
}


def is_reserved_name(stem: str) -> bool:
    """Whether a stem is a Windows reserved device name (case-insensitive)"""
    return stem.upper() in RESERVED_NAMES


def describe_char(char: str) -> str:
    """Printable form of a character (control characters as \\xNN)"""
    code = ord(char)
    if code < 32:
        return f"\\x{code:02x}"
    return char

