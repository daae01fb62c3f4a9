"""Load and validate the landing page site configuration.

This subpackage parses ``config/site.yaml`` into strongly typed dataclasses
(:class:`SiteConfig`, :class:`SeoConfig`, :class:`BuildConfig`,
:class:`ContactConfig`) consumed by the static build, the verifier, and the
contact handler. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from landing_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.seo.name  # doctest: +SKIP
'IdeaFlask'
"""

from .loader import load_site_config
from .models import (
    BuildConfig,
    ContactConfig,
    SeoConfig,
    SiteConfig,
    SiteConfigError,
)

__all__ = [
    "BuildConfig",
    "ContactConfig",
    "SeoConfig",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
