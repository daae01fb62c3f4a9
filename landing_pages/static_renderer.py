"""Ahead-of-time rendering of the landing page for search engines.

This module turns the static HTML shell plus the content collections into a
fully pre-rendered document. Every render target in the shell is located by
its element id in a parsed tree, flagged with the render marker, and has its
children replaced by the fragments that :mod:`landing_pages.fragments`
produces. Search and social metadata, including a JSON-LD service record, is
appended to ``<head>``. The hydration controller later sees the marker and
binds behaviour instead of rendering again.

Typical usage mirrors the CLI ``build`` command:

>>> from pathlib import Path
>>> from landing_pages.config import load_site_config
>>> from landing_pages.static_renderer import StaticRenderer
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> StaticRenderer(site.seo).run(
...     site.build.shell, site.build.content_dir, site.build.output
... )  # doctest: +SKIP
PosixPath('public/index.html')

The output is written to a temporary file beside the destination and moved
into place only once complete, so a failed build never leaves a partial
document behind. The shell itself is never modified.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import logging
import os
import tempfile
import typing as typ
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import NavigableString
from bs4.formatter import HTMLFormatter
from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markupsafe import Markup

from ._constants import (
    ABOUT_CONTAINER,
    ADVANTAGES_CONTAINER,
    DOT_CONTAINER,
    FAQ_CONTAINER,
    PORTFOLIO_CONTAINER,
    RENDER_MARKER_ATTR,
    RENDER_MARKER_VALUE,
    STEPS_CONTENT,
    STEPS_LIST,
)
from .content import ContentLoadError, load_content_dir
from .environment import build_environment
from .fragments import FragmentRenderer, default_renderer, strip_tags

if typ.TYPE_CHECKING:
    from bs4.element import Tag

    from .config import SeoConfig
    from .content import ContentBundle

logger = logging.getLogger(__name__)

# Keeps non-ASCII text readable and emits HTML5 void elements as ``<br>``.
OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)

SCHEMA_CONTEXT = "https://schema.org"


class StaticRenderError(RuntimeError):
    """Raised when the static build cannot read, render, or write the page."""


@dc.dataclass(frozen=True, slots=True)
class RenderTarget:
    """A shell element whose children are replaced by generated markup."""

    element_id: str
    render: cabc.Callable[[FragmentRenderer, ContentBundle], str]


def _steps_list(fragments: FragmentRenderer, bundle: ContentBundle) -> str:
    return fragments.render_steps(bundle.steps, sanitize=True)[0]


def _steps_content(fragments: FragmentRenderer, bundle: ContentBundle) -> str:
    return fragments.render_steps(bundle.steps, sanitize=True)[1]


RENDER_TARGETS: tuple[RenderTarget, ...] = (
    RenderTarget(
        ADVANTAGES_CONTAINER,
        lambda f, b: f.render_advantages(b.advantages, sanitize=True),
    ),
    RenderTarget(
        PORTFOLIO_CONTAINER,
        lambda f, b: f.render_portfolio(b.portfolio, sanitize=True),
    ),
    RenderTarget(DOT_CONTAINER, lambda f, b: f.render_portfolio_dots(b.portfolio)),
    RenderTarget(ABOUT_CONTAINER, lambda f, b: f.render_about(b.about_me)),
    RenderTarget(STEPS_LIST, _steps_list),
    RenderTarget(STEPS_CONTENT, _steps_content),
    RenderTarget(FAQ_CONTAINER, lambda f, b: f.render_faq(b.faq)),
)


class StaticRenderer:
    """Pre-render the landing page shell and inject search metadata."""

    def __init__(
        self,
        seo: SeoConfig,
        *,
        templates_dir: Path | None = None,
        fragments: FragmentRenderer | None = None,
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        seo : SeoConfig
            Site metadata used for the meta tags and the JSON-LD record.
        templates_dir : Path, optional
            Directory holding ``head_meta.jinja``. Defaults to
            ``landing_pages/templates``.
        fragments : FragmentRenderer, optional
            Renderer for the region fragments; defaults to the shared one so
            build output matches what hydration would produce.
        """
        self.seo = seo
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.fragments = fragments or default_renderer()
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.head_template = self.env.get_template("head_meta.jinja")

    def render_regions(self, bundle: ContentBundle) -> dict[str, str]:
        """Return the generated markup for every render target, keyed by id."""
        with build_environment():
            return {
                target.element_id: target.render(self.fragments, bundle)
                for target in RENDER_TARGETS
            }

    def build_structured_data(self, bundle: ContentBundle) -> dict[str, typ.Any]:
        """Summarize the collections as a schema.org ``ProfessionalService``."""
        seo = self.seo
        data: dict[str, typ.Any] = {
            "@context": SCHEMA_CONTEXT,
            "@type": "ProfessionalService",
            "name": seo.service_name or seo.name,
            "description": seo.service_description or seo.description,
            "url": seo.url,
        }
        optional = {
            "telephone": seo.telephone,
            "email": seo.email,
            "priceRange": seo.price_range,
            "areaServed": seo.area_served,
        }
        data.update({key: value for key, value in optional.items() if value})
        data["hasOfferCatalog"] = {
            "@type": "OfferCatalog",
            "name": seo.catalog_name or seo.name,
            "itemListElement": [
                {
                    "@type": "Offer",
                    "itemOffered": {
                        "@type": "Service",
                        "name": _text(item, "title"),
                        "description": _joined(item, "content", "emphasis"),
                    },
                }
                for item in bundle.advantages
            ],
        }
        data["workExample"] = [
            _creative_work(item, seo.url) for item in bundle.portfolio
        ]
        data["mainEntity"] = {
            "@type": "FAQPage",
            "mainEntity": [
                {
                    "@type": "Question",
                    "name": _text(item, "question"),
                    "acceptedAnswer": {
                        "@type": "Answer",
                        "text": _joined(item, "answer", "emphasis"),
                    },
                }
                for item in bundle.faq
            ],
        }
        return data

    def render_head(self, bundle: ContentBundle) -> str:
        """Render the meta tag and JSON-LD block appended to ``<head>``."""
        payload = json.dumps(
            self.build_structured_data(bundle), indent=2, ensure_ascii=False
        )
        # keep "</script>" inside string values from closing the block
        payload = payload.replace("</", "<\\/")
        return self.head_template.render(
            seo=self.seo, structured_data=Markup(payload)
        )

    def render(self, shell_html: str, bundle: ContentBundle) -> str:
        """Return ``shell_html`` with every render target pre-rendered.

        Raises
        ------
        StaticRenderError
            If the shell has no ``<head>`` element or a template fails.
        """
        soup = BeautifulSoup(shell_html, "html.parser")
        head = soup.head
        if head is None:
            msg = "HTML shell has no <head> element."
            raise StaticRenderError(msg)
        try:
            regions = self.render_regions(bundle)
            head_html = self.render_head(bundle)
        except TemplateError as exc:
            msg = f"Failed to render page fragments: {exc}"
            raise StaticRenderError(msg) from exc

        for element_id, markup in regions.items():
            container = soup.find(id=element_id)
            if container is None:
                logger.warning("Render target #%s not found in shell; skipped", element_id)
                continue
            container[RENDER_MARKER_ATTR] = RENDER_MARKER_VALUE
            _replace_children(container, markup)
            logger.debug("Pre-rendered #%s", element_id)

        _append_markup(head, head_html)
        return soup.decode(formatter=OUTPUT_FORMATTER)

    def run(self, shell_path: Path, content_dir: Path, output_path: Path) -> Path:
        """Read the shell and content, render, and write ``output_path``.

        Returns
        -------
        Path
            The written output path.

        Raises
        ------
        StaticRenderError
            On any read, decode, render, or write failure. No output file is
            left behind in that case.
        """
        if shell_path.resolve() == output_path.resolve():
            msg = f"Refusing to overwrite the HTML shell '{shell_path}'."
            raise StaticRenderError(msg)
        try:
            shell_html = shell_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read HTML shell '{shell_path}': {exc}"
            raise StaticRenderError(msg) from exc
        try:
            bundle = load_content_dir(content_dir)
        except ContentLoadError as exc:
            raise StaticRenderError(str(exc)) from exc
        logger.info("Loaded content collections from %s", content_dir)

        html = self.render(shell_html, bundle)
        if not html.endswith("\n"):
            html += "\n"
        write_atomic(output_path, html)
        logger.info("Wrote pre-rendered page to %s", output_path)
        return output_path


def _text(item: object, key: str) -> str:
    """Return the tag-free value of ``item[key]`` or an empty string."""
    if not isinstance(item, cabc.Mapping):
        return ""
    value = item.get(key)
    if value is None:
        return ""
    return strip_tags(str(value)).strip()


def _joined(item: object, *keys: str) -> str:
    return " ".join(part for part in (_text(item, key) for key in keys) if part)


def _creative_work(item: object, base_url: str) -> dict[str, str]:
    work = {
        "@type": "CreativeWork",
        "name": _text(item, "title"),
        "description": _text(item, "objectives"),
    }
    image = _text(item, "image16_9")
    if image:
        work["image"] = f"{base_url}/img{image}"
    return work


def _parse_fragment(markup: str) -> list[typ.Any]:
    fragment = BeautifulSoup(markup, "html.parser")
    return [node.extract() for node in list(fragment.contents)]


def _replace_children(container: Tag, markup: str) -> None:
    """Replace ``container``'s children with the nodes parsed from ``markup``."""
    container.clear()
    container.append(NavigableString("\n"))
    for node in _parse_fragment(markup):
        container.append(node)
    container.append(NavigableString("\n"))


def _append_markup(parent: Tag, markup: str) -> None:
    for node in _parse_fragment(markup):
        parent.append(node)
    parent.append(NavigableString("\n"))


def write_atomic(output_path: Path, text: str) -> None:
    """Write ``text`` to ``output_path`` via a temporary file and rename."""
    tmp_name: str | None = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=output_path.parent,
            prefix=f".{output_path.stem}-",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(text)
        os.replace(tmp_name, output_path)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        msg = f"Failed to write '{output_path}': {exc}"
        raise StaticRenderError(msg) from exc


__all__ = [
    "OUTPUT_FORMATTER",
    "RENDER_TARGETS",
    "RenderTarget",
    "StaticRenderError",
    "StaticRenderer",
    "write_atomic",
]
