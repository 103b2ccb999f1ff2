"""External identifiers carried by activities.

Identity of an ``ExternalIdentifier`` is ``(type, normalised value)``: a DOI written
as a resolver URL equals the bare DOI, in sets as well as in ``==``. Values are
stored verbatim. The relationship is a separate matching axis handled by
``crissync.domain.sync.diff``.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from crissync.domain.model.enums import Relationship

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


@dataclass(frozen=True, slots=True, eq=False)
class ExternalIdentifier:
    type: str
    value: str
    relationship: Relationship | None = Relationship.SELF
    url: str | None = field(default=None, repr=False)

    @property
    def normalised_value(self) -> str:
        return normalise_value(self.type, self.value)

    @property
    def identity(self) -> tuple[str, str]:
        return (self.type, self.normalised_value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExternalIdentifier):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    @property
    def is_self(self) -> bool:
        return self.relationship == Relationship.SELF

    @property
    def is_part_of(self) -> bool:
        return self.relationship == Relationship.PART_OF


type IdentifierSet = tuple[ExternalIdentifier, ...]


def self_identifiers(identifiers: Iterable[ExternalIdentifier]) -> IdentifierSet:
    return tuple(eid for eid in identifiers if eid.is_self)


def part_of_identifiers(identifiers: Iterable[ExternalIdentifier]) -> IdentifierSet:
    return tuple(eid for eid in identifiers if eid.is_part_of)


def identical_identifiers(
    first: Iterable[ExternalIdentifier],
    second: Iterable[ExternalIdentifier],
) -> bool:
    """Strict comparison: same type, normalised value *and* relationship, both ways."""

    left = {(eid.type, eid.normalised_value, eid.relationship) for eid in first}
    right = {(eid.type, eid.normalised_value, eid.relationship) for eid in second}
    return left == right


_ISSN_PATTERN: Final = re.compile(r"(?:^|[^\d])(\d{4} ?[-–]? ?\d{3}[\dXx])(?:$|[^-\d])")
_ISBN_PATTERN: Final = re.compile(r"([0-9][-0-9 ]{8,15}[0-9xX])(?:$|[^0-9])")
_DOI_PATTERN: Final = re.compile(r"(10(?:\.[0-9a-zA-Z]+)+/(?:(?![\"&'])\S)+)")
_ARXIV_PATTERN: Final = re.compile(
    r"(?:arXiv:)?(\d{4}\.\d{4,5}(?:v\d)?|[\w\-.]+/\d{7}(?:v\d)?)\b", re.IGNORECASE
)
# only the prefix is case-insensitive
_RRID_PATTERN: Final = re.compile(
    r"(?:(?i:RRID:))?(AB_\d{6}|CVCL_[0-9A-Z]{4}|SCR_\d{6}|IMSR_JAX:\d{6}|Addgene_\d{5}"
    r"|SAMN\d{8}|MMRRC_\d{6}-UCD)"
)


def _normalise_issn(value: str) -> str:
    match = _ISSN_PATTERN.search(value)
    if match is None:
        return value
    digits = match.group(1).replace(" ", "").replace("-", "").replace("–", "")
    digits = digits.replace("x", "X")
    return f"{digits[:4]}-{digits[4:8]}"


def _normalise_isbn(value: str) -> str:
    match = _ISBN_PATTERN.search(value)
    if match is None:
        return value
    digits = match.group(1).replace("-", "").replace(" ", "").replace("x", "X")
    if len(digits) in (10, 13):
        return digits
    return value


def _normalise_doi(value: str) -> str:
    # may be escaped more than once
    if "&" in value and ";" in value:
        while True:
            unescaped = html.unescape(value)
            if len(unescaped) >= len(value):
                break
            value = unescaped
    match = _DOI_PATTERN.search(value)
    return match.group(1) if match else value


def _normalise_arxiv(value: str) -> str:
    match = _ARXIV_PATTERN.search(value)
    return f"arXiv:{match.group(1)}" if match else value


def _normalise_rrid(value: str) -> str:
    match = _RRID_PATTERN.search(value)
    return f"RRID:{match.group(1)}" if match else value


_NORMALISERS: Final[dict[str, Callable[[str], str]]] = {
    "issn": _normalise_issn,
    "isbn": _normalise_isbn,
    "doi": _normalise_doi,
    "arxiv": _normalise_arxiv,
    "rrid": _normalise_rrid,
}


def normalise_value(id_type: str, value: str) -> str:
    """Return the comparison form of ``value`` for identifiers of ``id_type``."""

    normaliser = _NORMALISERS.get(id_type)
    if normaliser is None:
        return value
    return normaliser(value)
