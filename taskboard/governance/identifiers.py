"""
Assignee identifier grammar.

An assignee string is either a versioned agent identifier,
<base-name>-v<N>, or anything else (a bare role, a person's handle, junk).
Classification never fails; deciding whether an unversioned string is a
generic role or a format error needs registry context and is left to the
assignment policy.

    >>> classify("backend-dev-val-001-v2")
    Versioned(raw='backend-dev-val-001-v2', base_name='backend-dev-val-001', version=2)
    >>> classify("backend-dev")
    Unversioned(raw='backend-dev')
"""

import re
from dataclasses import dataclass
from typing import Union

from taskboard.lib.constants import TOKEN_PATTERN

__all__ = ["Unversioned", "Versioned", "Classification", "classify", "is_valid_token", "format_identifier"]

# Versions start at 1 and never carry a leading zero
VERSIONED_PATTERN = re.compile(
    r'^(?P<base>[a-z0-9]+(?:-[a-z0-9]+)*)-v(?P<version>[1-9][0-9]*)$'
)


@dataclass(frozen=True)
class Unversioned:
    raw: str


@dataclass(frozen=True)
class Versioned:
    raw: str
    base_name: str
    version: int


Classification = Union[Unversioned, Versioned]


def classify(value: str) -> Classification:
    """Classify an assignee string. Pure; never raises."""
    match = VERSIONED_PATTERN.fullmatch(value)
    if match is None:
        return Unversioned(raw=value)
    return Versioned(
        raw=value,
        base_name=match.group("base"),
        version=int(match.group("version")),
    )


def is_valid_token(value: str) -> bool:
    """True for lowercase alphanumeric tokens joined by single hyphens."""
    return bool(TOKEN_PATTERN.fullmatch(value))


def format_identifier(base_name: str, version: int) -> str:
    if version < 1:
        raise ValueError(f"Agent versions start at 1, got {version}")
    return f"{base_name}-v{version}"
