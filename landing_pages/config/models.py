"""Typed dataclasses describing landing page site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SeoConfig:
    """Search and social metadata injected into the pre-rendered page head."""

    name: str
    url: str
    description: str
    keywords: list[str] = dc.field(default_factory=list)
    author: str = ""
    og_title: str = ""
    og_description: str = ""
    twitter_description: str = ""
    image: str = ""
    telephone: str = ""
    email: str = ""
    price_range: str = ""
    area_served: str = ""
    catalog_name: str = ""
    service_name: str = ""
    service_description: str = ""

    @property
    def social_title(self) -> str:
        """Return the Open Graph title, falling back to the site name."""
        return self.og_title or self.name

    @property
    def social_description(self) -> str:
        """Return the Open Graph description, falling back to the page one."""
        return self.og_description or self.description


@dc.dataclass(slots=True)
class BuildConfig:
    """Input and output locations for the static build."""

    shell: Path = Path("site/index.html")
    content_dir: Path = Path("site/data")
    output: Path = Path("public/index.html")


@dc.dataclass(slots=True)
class ContactConfig:
    """Settings for the contact form mail handler."""

    recipient: str
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    use_tls: bool = True
    sender_name: str = "Landing Page Enquiry"
    allowed_origin: str = "*"
    timeout: float = 10.0


@dc.dataclass(slots=True)
class SiteConfig:
    """Top-level site configuration sourced from ``config/site.yaml``."""

    seo: SeoConfig
    build: BuildConfig = dc.field(default_factory=BuildConfig)
    contact: ContactConfig | None = None


__all__ = [
    "BuildConfig",
    "ContactConfig",
    "SeoConfig",
    "SiteConfig",
    "SiteConfigError",
]
