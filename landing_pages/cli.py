"""Cyclopts CLI entrypoint for building and checking the landing page.

The ``landing`` console script defined here pre-renders the landing page
shell for search engines, scores the written page for its search metadata,
and previews client-side hydration against a page. Typical usage involves
running ``landing build`` in CI before deploying ``public/`` and
``landing verify`` right after it.

Examples
--------
Build the page for the default configuration:

>>> from landing_pages.cli import main
>>> main()  # doctest: +SKIP

Build into a custom location:

>>> from landing_pages.cli import app
>>> app.run(["build", "--output", "dist/index.html"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml.error import YAMLError

from .config import SiteConfig, SiteConfigError, load_site_config
from .content import ContentLoader, ContentLoadError, load_content_dir
from .hydration import Document, start
from .static_renderer import StaticRenderer, StaticRenderError, write_atomic
from .verify import advisory_keywords, advisory_lines, default_checks, score

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="landing", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _fail(message: str) -> typ.NoReturn:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _load_config(path: Path) -> SiteConfig:
    """Load ``path`` or exit through :func:`_fail` when it is unusable."""
    try:
        return load_site_config(path)
    except (OSError, UnicodeDecodeError, TypeError, YAMLError, SiteConfigError) as exc:
        _fail(f"invalid config '{_format_path(path)}': {exc}")


@app.command(help="Pre-render the landing page shell with content and metadata.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    shell: typ.Annotated[
        Path | None, Parameter(help="Override the HTML shell path")
    ] = None,
    content_dir: typ.Annotated[
        Path | None, Parameter(help="Override the content collection directory")
    ] = None,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Override the output HTML path", env_var="INPUT_OUTPUT"),
    ] = None,
) -> None:
    """Render every region into the shell and write the SEO page.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    shell : Path or None, optional
        HTML shell to read; defaults to ``build.shell`` from the config.
    content_dir : Path or None, optional
        Directory holding the JSON collections; defaults to
        ``build.content_dir``.
    output : Path or None, optional
        Destination for the pre-rendered page; defaults to ``build.output``.

    Raises
    ------
    SystemExit
        With status 1 when any input cannot be read or the page cannot be
        written. No output file is produced in that case.
    """
    site_config = _load_config(config)
    paths = site_config.build
    renderer = StaticRenderer(site_config.seo)
    try:
        written = renderer.run(
            shell or paths.shell,
            content_dir or paths.content_dir,
            output or paths.output,
        )
    except StaticRenderError as exc:
        _fail(str(exc))
    print(f"wrote {_format_path(written)}")


@app.command(help="Score a pre-rendered page for its search metadata.")
def verify(
    *,
    page: typ.Annotated[
        Path | None, Parameter(help="Pre-rendered page to check")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print a check-by-check report and fail when any check misses.

    Advisory lines on page size, keyword usage and headings follow the
    report; they never change the exit status.

    Parameters
    ----------
    page : Path or None, optional
        Page to check; defaults to ``build.output`` from the config.
    config : Path, optional
        Path to the ``site.yaml`` configuration file.

    Raises
    ------
    SystemExit
        With status 1 when the page is missing or any check fails.
    """
    site_config = _load_config(config)
    target = page or site_config.build.output
    if not target.exists():
        _fail(f"'{_format_path(target)}' not found; run 'landing build' first.")
    try:
        bundle = load_content_dir(site_config.build.content_dir)
    except ContentLoadError as exc:
        _fail(str(exc))
    try:
        html = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _fail(f"Failed to read '{_format_path(target)}': {exc}")
    report = score(html, default_checks(bundle))
    for line in report.lines():
        print(line)
    keywords = advisory_keywords(site_config.seo)
    for line in advisory_lines(html, keywords, size_bytes=target.stat().st_size):
        print(line)
    if not report.ok:
        raise SystemExit(1)


@app.command(help="Hydrate a page against its content and write the result.")
def hydrate(
    *,
    page: typ.Annotated[Path, Parameter(help="Page to hydrate")],
    output: typ.Annotated[Path, Parameter(help="Where to write the hydrated page")],
    source: typ.Annotated[
        str | None,
        Parameter(help="Content base URL or directory", env_var="INPUT_SOURCE"),
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    viewport_width: typ.Annotated[
        int, Parameter(help="Viewport width used by responsive behaviour")
    ] = 1280,
) -> None:
    """Preview what the client-side pass does to ``page``.

    Prints the state each region was found in. When loading content fails
    the page is left untouched and nothing is written.
    """
    if source is None:
        source = str(_load_config(config).build.content_dir)
    try:
        markup = page.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _fail(f"Failed to read '{_format_path(page)}': {exc}")
    document = Document(markup, viewport_width=viewport_width)
    report = start(document, ContentLoader(source))
    if report is None:
        _fail("Content could not be loaded; page left unchanged.")
    for name, state in report.states.items():
        print(f"{name}: {state.value}")
    try:
        write_atomic(output, document.serialize())
    except StaticRenderError as exc:
        _fail(str(exc))
    print(f"wrote {_format_path(output)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the `landing` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(
        level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
    )
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
