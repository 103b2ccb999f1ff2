from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from crissync.config import MissingConfigurationError
from crissync.domain.ports import CommunicationError
from crissync.domain.sync import ExportReport, SyncOutcome
from crissync.ui import cli
from tests.helpers.activities import doi, make_work_summary

if TYPE_CHECKING:
    from pathlib import Path

LOCAL_WORKS = [
    {
        "put-code": 7,
        "title": {"title": {"value": "Local Work"}},
        "type": "journal-article",
        "publication-date": {"year": {"value": "2020"}},
        "external-ids": {
            "external-id": [
                {
                    "external-id-type": "doi",
                    "external-id-value": "10.1/local",
                    "external-id-relationship": "self",
                }
            ]
        },
    }
]


@pytest.fixture
def local_file(tmp_path: Path) -> Path:
    path = tmp_path / "local.json"
    path.write_text(json.dumps(LOCAL_WORKS), encoding="utf-8")
    return path


def test_export_writes_report(
    monkeypatch: pytest.MonkeyPatch, local_file: Path, tmp_path: Path
) -> None:
    captured: dict[str, object] = {}

    def fake_export(kind: str, local: list[object], **kwargs: object) -> ExportReport:
        captured.update(kwargs, kind=kind, local=local)
        return ExportReport({7: SyncOutcome.added(1001)}, {55: SyncOutcome.deleted(55)})

    monkeypatch.setattr(cli, "export_activities", fake_export)
    output = tmp_path / "report.json"

    cli.main(["export", "--input", str(local_file), "--output", str(output), "--force"])

    assert captured["kind"] == "works"
    assert captured["force"] is True
    assert captured["types"] is None
    (work,) = captured["local"]  # type: ignore[misc]
    assert work.key == 7
    assert json.loads(output.read_text(encoding="utf-8")) == {
        "outcomes": {"7": {"status": "add_ok", "put-code": 1001}},
        "deletions": {"55": {"status": "delete_ok", "put-code": 55}},
    }


def test_import_prints_candidates(
    monkeypatch: pytest.MonkeyPatch, local_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_import(kind: str, local: list[object], **kwargs: object) -> list[object]:
        captured.update(kwargs, kind=kind)
        return [make_work_summary(doi("10.1/remote"), title="Remote Work")]

    monkeypatch.setattr(cli, "import_activities", fake_import)

    cli.main(
        [
            "import",
            "--input",
            str(local_file),
            "--type",
            "journal-article",
            "--type",
            "book",
        ]
    )

    assert captured["types"] == ["journal-article", "book"]
    (candidate,) = json.loads(capsys.readouterr().out)
    assert candidate["title"] == {"title": {"value": "Remote Work"}}
    assert "put-code" not in candidate


def test_import_count(
    monkeypatch: pytest.MonkeyPatch, local_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "count_imports", lambda *_, **__: 3)

    cli.main(["import-count", "--kind", "works", "--input", str(local_file)])

    assert json.loads(capsys.readouterr().out) == {"count": 3}


def test_missing_input_file_exits_with_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["import", "--input", str(tmp_path / "absent.json")])

    assert excinfo.value.code == 2


def test_malformed_input_exits_with_usage_error(tmp_path: Path) -> None:
    path = tmp_path / "local.json"
    path.write_text('{"not": "a list"}', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["export", "--input", str(path)])

    assert excinfo.value.code == 2


def test_missing_configuration_exits_with_usage_error(
    monkeypatch: pytest.MonkeyPatch, local_file: Path
) -> None:
    def fake_export(*_: object, **__: object) -> None:
        raise MissingConfigurationError("Missing configuration for: ORCID_ID")

    monkeypatch.setattr(cli, "export_activities", fake_export)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["export", "--input", str(local_file)])

    assert excinfo.value.code == 2


def test_communication_failure_exits_with_error(
    monkeypatch: pytest.MonkeyPatch, local_file: Path
) -> None:
    def fake_import(*_: object, **__: object) -> None:
        raise CommunicationError("listing failed", status_code=503)

    monkeypatch.setattr(cli, "import_updates", fake_import)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["import-updates", "--input", str(local_file)])

    assert excinfo.value.code == 1
