#!/usr/bin/env python3

"""
Option resolution for filters and exporters.

Options arrive as compact strings such as ``chr='2L;3R'``. When a string
is missing or cannot be parsed, the values are requested from an
injected option provider instead, which may report cancellation.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

# Result reported by a filter when option collection was cancelled
CANCELLED_INDICES = (-1,)

_VALUE_SEPARATOR = re.compile(r"\s*;\s*")
_NAME_OPTIONS = re.compile(r"names='([^']+)' action='([EeIi])'")
_QUALITY_LEVEL = re.compile(r"level='(\d+)'")
_INTRON_OPTIONS = re.compile(r"max='(\d*)' min='(\d*)' pops='([^']+)'")


class ErrorCode(Enum):
    """Outcome of a filter or export call."""
    OK = "ok"
    CANCELLED_BY_USER = "cancelled_by_user"
    INVALID_PARAMETER = "invalid_parameter"
    IO_ERROR = "io_error"
    UNSUPPORTED_DATA = "unsupported_data"


@dataclass
class NameOptions:
    """Options of the gene name filter."""
    names: List[str] = field(default_factory=list)
    exclude: bool = True


@dataclass
class IntronOptions:
    """Options of the short introns filter; a max_length of None means unbounded."""
    populations: List[str] = field(default_factory=list)
    min_length: int = 0
    max_length: Optional[int] = None


def split_values(value: str) -> List[str]:
    """Split a ``;`` separated value list, trimming whitespace and dropping empty items."""
    return [v for v in _VALUE_SEPARATOR.split(value.strip()) if v]


def parse_option_list(params: Optional[str], key: str) -> Optional[List[str]]:
    """
    Extract the value list of ``key='v1;v2'`` from an option string.

    Returns None when the string is empty or does not contain the key.
    """
    if not params:
        return None
    match = re.search(rf"{re.escape(key)}='([^']+)'", params)
    if not match:
        return None
    return split_values(match.group(1)) or None


def parse_name_options(params: Optional[str]) -> Optional[NameOptions]:
    """Parse ``names='N1;N2' action='E|I'``; returns None when unparsable."""
    if not params:
        return None
    match = _NAME_OPTIONS.search(params)
    if not match:
        return None
    names = split_values(match.group(1))
    if not names:
        return None
    return NameOptions(names=names, exclude=match.group(2).upper() == 'E')


def parse_quality_level(params: Optional[str]) -> Optional[int]:
    """Parse ``level='N'``; returns None when unparsable."""
    if not params:
        return None
    match = _QUALITY_LEVEL.search(params)
    if not match:
        return None
    return int(match.group(1))


def parse_intron_options(params: Optional[str]) -> Optional[IntronOptions]:
    """
    Parse ``max='N' min='N' pops='P1;P2'``; returns None when unparsable.

    An empty ``max`` leaves the length unbounded and an empty ``min`` means 0.
    """
    if not params:
        return None
    match = _INTRON_OPTIONS.search(params)
    if not match:
        return None
    populations = split_values(match.group(3))
    if not populations:
        return None
    max_length, min_length = match.group(1), match.group(2)
    return IntronOptions(populations=populations,
                         min_length=int(min_length) if min_length else 0,
                         max_length=int(max_length) if max_length else None)


class OptionProvider:
    """
    Interactive fallback used when an option string is missing or malformed.

    Each resolver is a callable returning the requested values or None when
    the user cancelled. Resolvers that are not supplied cancel. The intron
    resolver receives the populations found in the dataset.
    """

    def __init__(self,
                 chromosomes: Optional[Callable[[], Optional[List[str]]]] = None,
                 name_options: Optional[Callable[[], Optional[NameOptions]]] = None,
                 quality_level: Optional[Callable[[], Optional[int]]] = None,
                 intron_options: Optional[Callable[[List[str]], Optional[IntronOptions]]] = None):
        self._chromosomes = chromosomes
        self._name_options = name_options
        self._quality_level = quality_level
        self._intron_options = intron_options

    def resolve_chromosomes(self) -> Optional[List[str]]:
        if self._chromosomes is None:
            return None
        return self._chromosomes()

    def resolve_name_options(self) -> Optional[NameOptions]:
        if self._name_options is None:
            return None
        return self._name_options()

    def resolve_quality_level(self) -> Optional[int]:
        if self._quality_level is None:
            return None
        return self._quality_level()

    def resolve_intron_options(self, populations: List[str]) -> Optional[IntronOptions]:
        if self._intron_options is None:
            return None
        return self._intron_options(populations)


class CancellingOptionProvider(OptionProvider):
    """Provider that always reports cancellation; the default for scripted use."""

    def __init__(self):
        super().__init__()
