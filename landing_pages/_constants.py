"""Common literal values shared by the build and hydration pipelines.

The render marker is the only signal passed from build time to hydration
time, so both sides import it from here rather than spelling it out.

Examples
--------
>>> from landing_pages import _constants
>>> _constants.RENDER_MARKER_ATTR
'data-seo-rendered'
>>> _constants.COLLECTION_FILES["about_me"]
'aboutMe.json'
"""

RENDER_MARKER_ATTR = "data-seo-rendered"
RENDER_MARKER_VALUE = "true"

COLLECTION_FILES: dict[str, str] = {
    "advantages": "advantages.json",
    "portfolio": "portfolio.json",
    "about_me": "aboutMe.json",
    "about_achievements": "aboutAch.json",
    "steps": "steps.json",
    "faq": "faq.json",
    "privacy": "privacy.json",
}

ADVANTAGES_CONTAINER = "advantages-container"
PORTFOLIO_CONTAINER = "portfolio-container"
DOT_CONTAINER = "dot-container"
ABOUT_CONTAINER = "about-content"
ACHIEVEMENTS_CONTAINER = "about-achievements"
STEPS_LIST = "steps-list"
STEPS_CONTENT = "steps-content"
FAQ_CONTAINER = "faq-container"
PRIVACY_CONTAINER = "privacy-content"

NARROW_VIEWPORT_MAX = 768
