"""Name helpers for generated fields and query roots."""

from __future__ import annotations

import re

# Upper-case runs before a capitalized word, capitalized words, lower-case
# runs, remaining upper-case runs, digits.
_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def words(value: str) -> list[str]:
    """Split an identifier or phrase into words.

    Example:
        >>> words("all NPMPackage")
        ['all', 'NPM', 'Package']
    """
    return _WORD.findall(value)


def camel_case(value: str) -> str:
    """Lower camel case, treating upper-case runs as one word.

    Example:
        >>> camel_case("NPMPackage")
        'npmPackage'
        >>> camel_case("all MarkdownRemark")
        'allMarkdownRemark'
        >>> camel_case("children Pet")
        'childrenPet'
    """
    parts = words(value)
    if not parts:
        return ""
    head, tail = parts[0].lower(), parts[1:]
    return head + "".join(p[:1].upper() + p[1:].lower() for p in tail)


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]
