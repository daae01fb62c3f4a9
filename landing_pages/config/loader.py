"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _coerce_bool,
    _coerce_number,
    _normalize_keywords,
    _optional_str,
    _required_str,
)
from .models import BuildConfig, ContactConfig, SeoConfig, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML file describing site metadata, build paths, and mail settings.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with SEO metadata, build locations, and the
        optional contact handler settings.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required sections or fields are missing or invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from landing_pages.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.build.output  # doctest: +SKIP
    PosixPath('public/index.html')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    site_raw = raw.get("site")
    if not isinstance(site_raw, dict):
        msg = "Site configuration requires a 'site' mapping."
        raise SiteConfigError(msg)

    return SiteConfig(
        seo=_build_seo_config(site_raw),
        build=_build_build_config(raw.get("build")),
        contact=_build_contact_config(raw.get("contact")),
    )


def _build_seo_config(payload: typ.Mapping[str, typ.Any]) -> SeoConfig:
    """Build search and social metadata from the ``site`` block."""
    name = _required_str(payload, "name", "site")
    url = _required_str(payload, "url", "site")
    description = _required_str(payload, "description", "site")

    def text(key: str) -> str:
        return _optional_str(payload.get(key)) or ""

    return SeoConfig(
        name=name,
        url=url.rstrip("/"),
        description=description,
        keywords=_normalize_keywords(payload.get("keywords")),
        author=text("author"),
        og_title=text("og_title"),
        og_description=text("og_description"),
        twitter_description=text("twitter_description"),
        image=text("image"),
        telephone=text("telephone"),
        email=text("email"),
        price_range=text("price_range"),
        area_served=text("area_served"),
        catalog_name=text("catalog_name"),
        service_name=text("service_name") or name,
        service_description=text("service_description") or description,
    )


def _build_build_config(payload: typ.Mapping[str, typ.Any] | None) -> BuildConfig:
    """Build the static build paths, defaulting any that are omitted."""
    base = BuildConfig()
    match payload:
        case None:
            return base
        case dict() as data:
            pass
        case _:
            msg = "Build configuration must be a mapping."
            raise SiteConfigError(msg)
    shell = Path(data.get("shell", base.shell))
    output = Path(data.get("output", base.output))
    if shell == output:
        msg = "Build 'output' must differ from 'shell'; the shell is never overwritten."
        raise SiteConfigError(msg)
    return BuildConfig(
        shell=shell,
        content_dir=Path(data.get("content_dir", base.content_dir)),
        output=output,
    )


def _build_contact_config(
    payload: typ.Mapping[str, typ.Any] | None,
) -> ContactConfig | None:
    """Build the contact handler settings, or None when the block is absent."""
    if payload is None:
        return None
    if not isinstance(payload, dict):
        msg = "Contact configuration must be a mapping."
        raise SiteConfigError(msg)
    recipient = _required_str(payload, "recipient", "contact")
    base = ContactConfig(recipient=recipient)
    return ContactConfig(
        recipient=recipient,
        smtp_host=_optional_str(payload.get("smtp_host")) or base.smtp_host,
        smtp_port=_coerce_number(
            payload.get("smtp_port"), default=base.smtp_port, key="smtp_port", cast=int
        ),
        use_tls=_coerce_bool(payload.get("use_tls"), default=base.use_tls),
        sender_name=_optional_str(payload.get("sender_name")) or base.sender_name,
        allowed_origin=_optional_str(payload.get("allowed_origin"))
        or base.allowed_origin,
        timeout=_coerce_number(
            payload.get("timeout"), default=base.timeout, key="timeout", cast=float
        ),
    )


__all__ = ["load_site_config"]
