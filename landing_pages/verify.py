"""Score a pre-rendered page for the search metadata and content it carries.

The checks are regular expressions evaluated against the written HTML. Meta
tag and JSON-LD checks are fixed; content checks look for the first record of
each pre-rendered region after a render marker, so they follow whatever the
content collections currently hold.

:func:`advisory_lines` adds observations about page weight, keyword usage and
the heading outline. They are printed after the score and never fail a run.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution

from ._constants import RENDER_MARKER_ATTR, RENDER_MARKER_VALUE
from .fragments import TAG_PATTERN

if typ.TYPE_CHECKING:
    from .config import SeoConfig
    from .content import ContentBundle

GRADES: tuple[tuple[int, str], ...] = ((90, "A+"), (80, "A"), (70, "B"), (60, "C"))
FALLBACK_GRADE = "D"
SIZE_WARNING_BYTES = 1024 * 1024
HEADING_LEVELS = ("h1", "h2", "h3")


@dc.dataclass(frozen=True, slots=True)
class SeoCheck:
    """A named pattern worth ``points`` when it matches the page."""

    name: str
    pattern: re.Pattern[str]
    points: int

    def matches(self, html: str) -> bool:
        return self.pattern.search(html) is not None


@dc.dataclass(slots=True)
class SeoReport:
    """Outcome of running a set of checks against one page."""

    score: int = 0
    max_score: int = 0
    passed: list[SeoCheck] = dc.field(default_factory=list)
    failed: list[SeoCheck] = dc.field(default_factory=list)

    @property
    def percentage(self) -> int:
        if not self.max_score:
            return 0
        return round(self.score / self.max_score * 100)

    @property
    def grade(self) -> str:
        for minimum, grade in GRADES:
            if self.score >= minimum:
                return grade
        return FALLBACK_GRADE

    @property
    def ok(self) -> bool:
        return not self.failed

    def lines(self) -> list[str]:
        """Return a printable summary, one line per check plus totals."""
        out = [f"PASS {check.name} ({check.points})" for check in self.passed]
        out.extend(f"FAIL {check.name} (0/{check.points})" for check in self.failed)
        out.append(
            f"Score: {self.score}/{self.max_score} ({self.percentage}%) "
            f"grade {self.grade}"
        )
        return out


def _meta(attribute: str, name: str) -> re.Pattern[str]:
    return re.compile(rf'<meta {attribute}="{re.escape(name)}" content=".+"')


META_CHECKS: tuple[SeoCheck, ...] = (
    SeoCheck("Meta description", _meta("name", "description"), 10),
    SeoCheck("Meta keywords", _meta("name", "keywords"), 5),
    SeoCheck("Open Graph title", _meta("property", "og:title"), 10),
    SeoCheck("Open Graph description", _meta("property", "og:description"), 10),
    SeoCheck("Open Graph image", _meta("property", "og:image"), 10),
    SeoCheck("Twitter card", _meta("name", "twitter:card"), 5),
    SeoCheck(
        "Structured data (JSON-LD)",
        re.compile(r'<script type="application/ld\+json">'),
        15,
    ),
)

# (label, collection, field, points)
CONTENT_CHECKS: tuple[tuple[str, str, str, int], ...] = (
    ("Advantages", "advantages", "title", 10),
    ("Portfolio", "portfolio", "title", 10),
    ("About", "about_me", "title", 5),
    ("Steps", "steps", "title", 5),
    ("FAQ", "faq", "question", 5),
)


def _first_text_run(value: object) -> str:
    """Return the first non-blank text run of ``value`` between tags."""
    if value is None:
        return ""
    for run in TAG_PATTERN.split(str(value)):
        text = run.strip()
        if text:
            return text
    return ""


def _content_check(
    label: str, records: cabc.Sequence[cabc.Mapping[str, typ.Any]], field: str, points: int
) -> SeoCheck | None:
    if not records or not isinstance(records[0], cabc.Mapping):
        return None
    snippet = _first_text_run(records[0].get(field))
    if not snippet:
        return None
    encoded = EntitySubstitution.substitute_xml(snippet)
    marker = f'{RENDER_MARKER_ATTR}="{RENDER_MARKER_VALUE}"'
    pattern = re.compile(rf"{re.escape(marker)}[\s\S]*?{re.escape(encoded)}")
    return SeoCheck(f"{label} pre-rendered content", pattern, points)


def default_checks(bundle: ContentBundle) -> list[SeoCheck]:
    """Return the meta checks plus one content check per non-empty region."""
    checks = list(META_CHECKS)
    for label, collection, field, points in CONTENT_CHECKS:
        check = _content_check(label, bundle.collection(collection), field, points)
        if check is not None:
            checks.append(check)
    return checks


def score(html: str, checks: cabc.Iterable[SeoCheck]) -> SeoReport:
    """Run ``checks`` against ``html`` and tally the points."""
    report = SeoReport()
    for check in checks:
        report.max_score += check.points
        if check.matches(html):
            report.score += check.points
            report.passed.append(check)
        else:
            report.failed.append(check)
    return report


def advisory_keywords(seo: SeoConfig) -> list[str]:
    """Return the brand name followed by the configured keywords, deduplicated."""
    keywords: list[str] = []
    for keyword in (seo.name, *seo.keywords):
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    return keywords


def advisory_lines(
    html: str, keywords: cabc.Iterable[str], *, size_bytes: int | None = None
) -> list[str]:
    """Return informational lines that never change the verdict.

    Parameters
    ----------
    html : str
        The page markup.
    keywords : Iterable[str]
        Terms whose occurrences are counted, case-sensitively.
    size_bytes : int, optional
        Size of the page on disk; the UTF-8 length of ``html`` when omitted.

    Returns
    -------
    list[str]
        ``INFO`` lines for observations and ``WARN`` lines for pages over
        1 MB, absent keywords, a heading outline without exactly one ``h1``,
        or no ``h2``/``h3`` headings.
    """
    if size_bytes is None:
        size_bytes = len(html.encode("utf-8"))
    size_mb = size_bytes / SIZE_WARNING_BYTES
    out = [f"INFO page size {size_mb:.2f} MB"]
    if size_bytes > SIZE_WARNING_BYTES:
        out.append("WARN page is larger than 1 MB and may load slowly")

    for keyword in keywords:
        count = html.count(keyword)
        if count:
            out.append(f'INFO keyword "{keyword}" appears {count} time(s)')
        else:
            out.append(f'WARN keyword "{keyword}" not found')

    soup = BeautifulSoup(html, "html.parser")
    counts = {level: len(soup.find_all(level)) for level in HEADING_LEVELS}
    out.append(
        "INFO headings " + " ".join(f"{level}={n}" for level, n in counts.items())
    )
    if counts["h1"] != 1:
        out.append(f"WARN expected exactly one h1, found {counts['h1']}")
    out.extend(
        f"WARN no {level} headings" for level in HEADING_LEVELS[1:] if not counts[level]
    )
    return out


__all__ = [
    "CONTENT_CHECKS",
    "META_CHECKS",
    "SeoCheck",
    "SeoReport",
    "advisory_keywords",
    "advisory_lines",
    "default_checks",
    "score",
]
