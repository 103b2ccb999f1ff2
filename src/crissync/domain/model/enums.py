"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Relationship(StrEnum):
    """How an external identifier relates to the activity carrying it."""

    SELF = "self"
    PART_OF = "part-of"
    VERSION_OF = "version-of"
    FUNDED_BY = "funded-by"


class WorkIdType(StrEnum):
    OTHER_ID = "other-id"
    AGR = "agr"
    ARXIV = "arxiv"
    ASIN = "asin"
    BIBCODE = "bibcode"
    CBA = "cba"
    CIT = "cit"
    CTX = "ctx"
    DOI = "doi"
    EID = "eid"
    ETHOS = "ethos"
    HANDLE = "handle"
    HIR = "hir"
    ISBN = "isbn"
    ISSN = "issn"
    JFM = "jfm"
    JSTOR = "jstor"
    LCCN = "lccn"
    MR = "mr"
    OCLC = "oclc"
    OL = "ol"
    OSTI = "osti"
    PAT = "pat"
    PMC = "pmc"
    PMID = "pmid"
    RFC = "rfc"
    RRID = "rrid"
    SOURCE_WORK_ID = "source-work-id"
    SSRN = "ssrn"
    URI = "uri"
    URN = "urn"
    WOSUID = "wosuid"
    ZBL = "zbl"
    CIENCIAIUL = "cienciaiul"


class FundingIdType(StrEnum):
    GRANT_NUMBER = "grant_number"
    CONTRACT_ID = "contract_id"
    AWARD = "award"
    PROPOSAL_ID = "proposal_id"
    DOI = "doi"
    URI = "uri"
    OTHER_ID = "other-id"


class WorkType(StrEnum):
    ARTISTIC_PERFORMANCE = "artistic-performance"
    BOOK_CHAPTER = "book-chapter"
    BOOK_REVIEW = "book-review"
    BOOK = "book"
    CONFERENCE_ABSTRACT = "conference-abstract"
    CONFERENCE_PAPER = "conference-paper"
    CONFERENCE_POSTER = "conference-poster"
    DATA_SET = "data-set"
    DICTIONARY_ENTRY = "dictionary-entry"
    DISCLOSURE = "disclosure"
    DISSERTATION = "dissertation"
    EDITED_BOOK = "edited-book"
    ENCYCLOPEDIA_ENTRY = "encyclopedia-entry"
    INVENTION = "invention"
    JOURNAL_ARTICLE = "journal-article"
    JOURNAL_ISSUE = "journal-issue"
    LECTURE_SPEECH = "lecture-speech"
    LICENSE = "license"
    MAGAZINE_ARTICLE = "magazine-article"
    MANUAL = "manual"
    NEWSLETTER_ARTICLE = "newsletter-article"
    NEWSPAPER_ARTICLE = "newspaper-article"
    ONLINE_RESOURCE = "online-resource"
    OTHER = "other"
    PATENT = "patent"
    PREPRINT = "preprint"
    REGISTERED_COPYRIGHT = "registered-copyright"
    REPORT = "report"
    RESEARCH_TECHNIQUE = "research-technique"
    RESEARCH_TOOL = "research-tool"
    SPIN_OFF_COMPANY = "spin-off-company"
    STANDARDS_AND_POLICY = "standards-and-policy"
    SUPERVISED_STUDENT_PUBLICATION = "supervised-student-publication"
    TECHNICAL_STANDARD = "technical-standard"
    TEST = "test"
    TRADEMARK = "trademark"
    TRANSLATION = "translation"
    WEBSITE = "website"
    WORKING_PAPER = "working-paper"
    UNDEFINED = "undefined"


class FundingType(StrEnum):
    AWARD = "award"
    CONTRACT = "contract"
    GRANT = "grant"
    SALARY_AWARD = "salary-award"


class SyncStatus(StrEnum):
    """Per-activity result of a synchronisation step."""

    ADD_OK = "add_ok"
    UPDATE_OK = "update_ok"
    UP_TO_DATE = "up_to_date"
    DELETE_OK = "delete_ok"
    INVALID = "invalid"
    ERROR = "error"


class InvalidField(StrEnum):
    """Reasons an activity fails the minimal quality criteria."""

    EXTERNAL_IDENTIFIERS = "external_identifiers"
    TITLE = "title"
    PUBLICATION_DATE = "publication_date"
    YEAR = "year"
    TYPE = "type"
    ORGANIZATION = "organization"
    OVERLAPPING_IDENTIFIERS = "overlapping_identifiers"
