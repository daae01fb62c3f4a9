"""Load the named content collections that feed every render pass.

The landing page is driven by seven JSON collections. :class:`ContentLoader`
fetches all of them concurrently, either over HTTP (``requests``) or from a
local directory, and only returns once every collection has arrived. The
first failure cancels the remaining fetches and surfaces as a single
:class:`ContentLoadError`; nothing is retried.

Example
-------
>>> from landing_pages.content import ContentLoader
>>> bundle = ContentLoader("https://example.com/js/data").load()  # doctest: +SKIP
>>> len(bundle.faq)  # doctest: +SKIP
6
"""

from __future__ import annotations

import collections.abc as cabc
import concurrent.futures as cf
import dataclasses as dc
import json
import logging
import typing as typ
from pathlib import Path

import requests

from ._constants import COLLECTION_FILES

logger = logging.getLogger(__name__)

Record: typ.TypeAlias = "cabc.Mapping[str, typ.Any]"


class ContentLoadError(RuntimeError):
    """Raised when any content collection cannot be fetched or decoded."""

    def __init__(self, collection: str, message: str) -> None:
        super().__init__(f"Failed to load '{collection}' content: {message}")
        self.collection = collection


@dc.dataclass(frozen=True, slots=True)
class ContentBundle:
    """Every content collection needed to render the landing page."""

    advantages: tuple[Record, ...] = ()
    portfolio: tuple[Record, ...] = ()
    about_me: tuple[Record, ...] = ()
    about_achievements: tuple[Record, ...] = ()
    steps: tuple[Record, ...] = ()
    faq: tuple[Record, ...] = ()
    privacy: tuple[Record, ...] = ()

    @classmethod
    def from_mapping(
        cls, collections: cabc.Mapping[str, cabc.Sequence[Record]]
    ) -> ContentBundle:
        """Build a bundle from ``{collection name: records}``; absent names are empty."""
        return cls(
            **{
                name: tuple(collections.get(name, ()))
                for name in COLLECTION_FILES
            }
        )

    def collection(self, name: str) -> tuple[Record, ...]:
        """Return the collection called ``name``."""
        if name not in COLLECTION_FILES:
            msg = f"Unknown content collection '{name}'."
            raise KeyError(msg)
        return getattr(self, name)


class ContentLoader:
    """Fetch every content collection in parallel with all-or-nothing semantics."""

    def __init__(
        self,
        source: str | Path,
        *,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        max_workers: int | None = None,
    ) -> None:
        """Initialize the loader for a URL base or a local directory.

        Parameters
        ----------
        source : str or Path
            Either an ``http(s)://`` base URL under which the collection files
            are served, or a directory containing them.
        session : requests.Session, optional
            Session used for HTTP fetches. A new session is created per load
            when omitted.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``10.0``.
        max_workers : int, optional
            Thread pool size; defaults to one worker per collection.
        """
        self.source = source
        self.timeout = timeout
        self.max_workers = max_workers or len(COLLECTION_FILES)
        self._session = session

    @property
    def is_remote(self) -> bool:
        return isinstance(self.source, str) and self.source.startswith(
            ("http://", "https://")
        )

    def load(self) -> ContentBundle:
        """Fetch all collections concurrently and return them as a bundle.

        Raises
        ------
        ContentLoadError
            If any single collection fails; pending fetches are cancelled and
            no partial bundle is returned.
        """
        session = self._session
        owns_session = session is None and self.is_remote
        if owns_session:
            session = requests.Session()
        try:
            with cf.ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = {
                    pool.submit(self._fetch, name, session): name
                    for name in COLLECTION_FILES
                }
                done, pending = cf.wait(futures, return_when=cf.FIRST_EXCEPTION)
                for future in pending:
                    future.cancel()
                results: dict[str, list[Record]] = {}
                for future in done:
                    # result() re-raises the failure that stopped the wait
                    results[futures[future]] = future.result()
        finally:
            if owns_session and session is not None:
                session.close()
        for name in COLLECTION_FILES:
            logger.info("Loaded %s: %d records", name, len(results[name]))
        return ContentBundle.from_mapping(results)

    def load_collection(self, name: str) -> list[Record]:
        """Fetch a single collection by name."""
        if name not in COLLECTION_FILES:
            msg = f"Unknown content collection '{name}'."
            raise KeyError(msg)
        if not self.is_remote:
            return self._fetch(name, None)
        with requests.Session() as session:
            return self._fetch(name, self._session or session)

    def _fetch(self, name: str, session: requests.Session | None) -> list[Record]:
        filename = COLLECTION_FILES[name]
        if self.is_remote:
            text = self._fetch_remote(name, filename, session)
        else:
            text = self._read_local(name, filename)
        return _decode_collection(name, text)

    def _fetch_remote(
        self, name: str, filename: str, session: requests.Session | None
    ) -> str:
        base = str(self.source).rstrip("/")
        url = f"{base}/{filename}"
        getter = session.get if session is not None else requests.get
        try:
            response = getter(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ContentLoadError(name, str(exc)) from exc
        return response.text

    def _read_local(self, name: str, filename: str) -> str:
        path = Path(self.source) / filename
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ContentLoadError(name, str(exc)) from exc


def _decode_collection(name: str, text: str) -> list[Record]:
    """Parse ``text`` as a JSON list of records."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ContentLoadError(name, f"invalid JSON ({exc})") from exc
    if not isinstance(payload, list):
        raise ContentLoadError(name, "expected a JSON list of records")
    return payload


def load_content_dir(path: Path) -> ContentBundle:
    """Read every collection from ``path`` sequentially.

    The static build has no use for concurrency; it reads each file once and
    aborts on the first failure.
    """
    collections: dict[str, list[Record]] = {}
    for name, filename in COLLECTION_FILES.items():
        file_path = path / filename
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ContentLoadError(name, str(exc)) from exc
        collections[name] = _decode_collection(name, text)
    return ContentBundle.from_mapping(collections)


__all__ = [
    "ContentBundle",
    "ContentLoadError",
    "ContentLoader",
    "load_content_dir",
]
