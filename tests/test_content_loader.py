"""Tests for the all-or-nothing content loader.

Remote fetches run against a ``requests.Session`` stand-in built with
pytest-mock, so no network access is needed.
"""

from __future__ import annotations

import json
import typing as typ

import pytest
import requests

from landing_pages._constants import COLLECTION_FILES
from landing_pages.content import (
    ContentBundle,
    ContentLoader,
    ContentLoadError,
    load_content_dir,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture

BASE_URL = "https://cdn.example.com/js/data"


def _session(
    mocker: MockerFixture,
    collections: dict[str, list[dict[str, typ.Any]]],
    *,
    failing: str | None = None,
) -> typ.Any:
    """Return a mocked session serving ``collections`` by file name."""
    by_file = {COLLECTION_FILES[name]: records for name, records in collections.items()}

    def fake_get(url: str, timeout: float) -> typ.Any:
        filename = url.rsplit("/", 1)[-1]
        response = mocker.Mock()
        if failing is not None and filename == COLLECTION_FILES[failing]:
            response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        else:
            response.raise_for_status.return_value = None
            response.text = json.dumps(by_file[filename])
        return response

    session = mocker.Mock(spec=requests.Session)
    session.get.side_effect = fake_get
    return session


def test_load_returns_every_collection(
    mocker: MockerFixture, collections: dict[str, list[dict[str, typ.Any]]]
) -> None:
    session = _session(mocker, collections)
    bundle = ContentLoader(BASE_URL, session=session, timeout=3.0).load()
    assert isinstance(bundle, ContentBundle), "expected a ContentBundle"
    for name in COLLECTION_FILES:
        assert list(bundle.collection(name)) == collections[name], (
            f"expected {name} to round-trip unchanged"
        )
    assert session.get.call_count == len(COLLECTION_FILES), (
        "expected one request per collection"
    )
    urls = sorted(call.args[0] for call in session.get.call_args_list)
    assert urls == sorted(f"{BASE_URL}/{f}" for f in COLLECTION_FILES.values()), (
        f"unexpected request URLs {urls!r}"
    )
    for call in session.get.call_args_list:
        assert call.kwargs["timeout"] == 3.0, "expected the per-request timeout"


def test_any_failure_fails_the_whole_load(
    mocker: MockerFixture, collections: dict[str, list[dict[str, typ.Any]]]
) -> None:
    session = _session(mocker, collections, failing="faq")
    with pytest.raises(ContentLoadError) as excinfo:
        ContentLoader(BASE_URL, session=session).load()
    assert excinfo.value.collection == "faq", (
        f"expected the failing collection to be reported, got {excinfo.value.collection!r}"
    )


def test_non_list_payload_is_rejected(content_dir: Path) -> None:
    (content_dir / COLLECTION_FILES["steps"]).write_text('{"step": 1}', encoding="utf-8")
    with pytest.raises(ContentLoadError, match="expected a JSON list"):
        ContentLoader(content_dir).load()


def test_invalid_json_is_rejected(content_dir: Path) -> None:
    (content_dir / COLLECTION_FILES["privacy"]).write_text("[{", encoding="utf-8")
    with pytest.raises(ContentLoadError, match="invalid JSON"):
        load_content_dir(content_dir)


def test_local_directory_load(
    content_dir: Path, collections: dict[str, list[dict[str, typ.Any]]]
) -> None:
    loader = ContentLoader(content_dir)
    assert loader.is_remote is False, "expected a directory source to be local"
    bundle = loader.load()
    assert len(bundle.portfolio) == len(collections["portfolio"]), (
        "expected every portfolio record"
    )


def test_missing_local_file_names_collection(content_dir: Path) -> None:
    (content_dir / COLLECTION_FILES["about_achievements"]).unlink()
    with pytest.raises(ContentLoadError) as excinfo:
        load_content_dir(content_dir)
    assert excinfo.value.collection == "about_achievements", (
        "expected the missing collection to be named"
    )


def test_undecodable_file_names_collection(content_dir: Path) -> None:
    (content_dir / COLLECTION_FILES["faq"]).write_bytes(b'[{"question": "\xff"}]')
    with pytest.raises(ContentLoadError) as excinfo:
        load_content_dir(content_dir)
    assert excinfo.value.collection == "faq", "expected the faq collection named"


def test_undecodable_local_source_fails_the_load(content_dir: Path) -> None:
    (content_dir / COLLECTION_FILES["faq"]).write_bytes(b'[{"question": "\xff"}]')
    with pytest.raises(ContentLoadError) as excinfo:
        ContentLoader(str(content_dir)).load()
    assert excinfo.value.collection == "faq", "expected the faq collection named"


def test_load_collection_rejects_unknown_name(content_dir: Path) -> None:
    with pytest.raises(KeyError):
        ContentLoader(content_dir).load_collection("testimonials")


def test_bundle_defaults_missing_collections_to_empty() -> None:
    bundle = ContentBundle.from_mapping({"faq": [{"question": "Q"}]})
    assert bundle.advantages == (), "expected absent collections to be empty"
    assert bundle.collection("faq") == ({"question": "Q"},), "expected faq records"
