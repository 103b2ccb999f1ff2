"""Port for the remote profile service the engine reconciles against."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from crissync.domain.model import (
        ActivitiesSummary,
        ClientId,
        Funding,
        PutCode,
        Work,
    )


class CommunicationError(RuntimeError):
    """Raised when a call to the remote profile service fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BulkFetchUnsupportedError(NotImplementedError):
    """Raised by clients that cannot read several activities in one call."""


@runtime_checkable
class ProfileClient(Protocol):
    """Remote collaborator consumed by the reconciliation engine.

    Every method except ``close`` raises ``CommunicationError`` when the remote call
    fails. ``close`` releases connections; the client is unusable afterwards.
    """

    @property
    def client_id(self) -> ClientId: ...

    def get_activities_summary(self) -> ActivitiesSummary: ...

    def get_work(self, put_code: PutCode) -> Work: ...

    def get_works(self, put_codes: Sequence[PutCode]) -> dict[PutCode, Work]: ...

    def add_work(self, work: Work) -> PutCode: ...

    def update_work(self, put_code: PutCode, work: Work) -> None: ...

    def delete_work(self, put_code: PutCode) -> None: ...

    def get_funding(self, put_code: PutCode) -> Funding: ...

    def get_fundings(self, put_codes: Sequence[PutCode]) -> dict[PutCode, Funding]: ...

    def add_funding(self, funding: Funding) -> PutCode: ...

    def update_funding(self, put_code: PutCode, funding: Funding) -> None: ...

    def delete_funding(self, put_code: PutCode) -> None: ...

    def close(self) -> None: ...
