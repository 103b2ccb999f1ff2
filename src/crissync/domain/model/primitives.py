"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass

type PutCode = int
type ClientId = str
type CountryCode = str


@dataclass(frozen=True, slots=True)
class PartialDate:
    """Calendar date where month and day, or all parts, may be unknown."""

    year: int | None = None
    month: int | None = None
    day: int | None = None


@dataclass(frozen=True, slots=True)
class Contributor:
    name: str
    role: str | None = None
    orcid: str | None = None
