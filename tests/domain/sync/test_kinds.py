from __future__ import annotations

from crissync.domain.model import ActivitiesSummary, Relationship
from crissync.domain.sync import FUNDINGS, WORKS, ActivityGroup, ActivityKind
from tests.helpers.activities import (
    doi,
    eid,
    issn,
    make_funding,
    make_funding_summary,
    make_work,
    make_work_summary,
)
from tests.support.profile import InMemoryProfileClient


def test_kinds_satisfy_protocol() -> None:
    assert isinstance(WORKS, ActivityKind)
    assert isinstance(FUNDINGS, ActivityKind)
    assert WORKS.bulk_size > 1
    assert FUNDINGS.bulk_size == 0


def test_summaries_select_listing_slice() -> None:
    listing = ActivitiesSummary(
        works=(make_work_summary(doi("10.1/x")),),
        fundings=(make_funding_summary(),),
    )

    assert WORKS.summaries(listing) == listing.works
    assert FUNDINGS.summaries(listing) == listing.fundings


def test_recognised_identifier_types() -> None:
    assert WORKS.recognises_id_type("doi")
    assert WORKS.recognises_id_type("source-work-id")
    assert WORKS.recognises_id_type("SOURCE_WORK_ID")
    assert not WORKS.recognises_id_type("grant_number")
    assert FUNDINGS.recognises_id_type("grant_number")
    assert FUNDINGS.recognises_id_type("grant-number")


def test_merge_unions_self_ids_and_keeps_preferred_metadata() -> None:
    preferred = make_work_summary(doi("10.1/x"), issn("1234-5678"), key=1, title="First")
    duplicate = make_work_summary(
        doi("https://doi.org/10.1/x"), eid("e1"), issn("9999-9999"), key=2, title="Second"
    )

    merged = WORKS.merge(ActivityGroup([preferred, duplicate]))

    assert merged.key == 1
    assert merged.title == "First"
    assert [eid_.value for eid_ in merged.self_ids] == ["10.1/x", "e1"]
    assert [eid_.value for eid_ in merged.part_of_ids] == ["1234-5678"]
    assert all(eid_.relationship == Relationship.PART_OF for eid_ in merged.part_of_ids)


def test_metadata_tuple() -> None:
    work = make_work_summary(title="T", type="book", year=1999)

    assert WORKS.metadata(work) == ("T", 1999, "book")


def test_kinds_bind_remote_operations() -> None:
    client = InMemoryProfileClient(works=[make_work(doi("10.1/x"), key=5)])

    put_code = FUNDINGS.add(client, make_funding())
    assert FUNDINGS.fetch(client, put_code).source == client.client_id
    assert WORKS.fetch_many(client, [5]) == {5: client.works[5]}

    WORKS.update(client, 5, make_work(doi("10.1/y")))
    assert client.works[5].self_ids == (doi("10.1/y"),)

    WORKS.delete(client, 5)
    assert client.works == {}
