"""Shared fixtures for the landing page test suite.

The fixtures build small, fully populated content bundles and HTML shells so
individual tests can focus on one behaviour without repeating setup.
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import pytest

from landing_pages._constants import COLLECTION_FILES
from landing_pages.config import SeoConfig
from landing_pages.content import ContentBundle

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SHELL_HTML = (FIXTURES_DIR / "shell.html").read_text(encoding="utf-8")

COLLECTIONS: dict[str, list[dict[str, typ.Any]]] = {
    "advantages": [
        {
            "image": "/adv/one.svg",
            "title": "Too much <span class=\"text-IF\">to say</span>?",
            "content": "One message for one audience.",
            "emphasis": "Visitors know what to do.",
        },
        {
            "image": "/adv/two.svg",
            "title": "Live in weeks",
            "content": "One page, one round of work.",
            "emphasis": "Launch sooner.",
        },
    ],
    "portfolio": [
        {
            "image16_9": f"/portfolio/{index}-wide.jpg",
            "image3_4": f"/portfolio/{index}-tall.jpg",
            "title": title,
            "objectives": f"Goal for {title}.",
            "solution": "<li>First</li><li>Second</li>",
        }
        for index, title in enumerate(
            ["WUWU Small World", "Mountain Tea", "Breathe Yoga", "Code Camp"]
        )
    ],
    "about_me": [{"title": "Hi! I'm Glen!", "content": "I build <strong>pages</strong>."}],
    "about_achievements": [
        {"title": "60+", "content": "pages launched"},
        {"title": "8 yrs", "content": "of design"},
    ],
    "steps": [
        {
            "step": 1,
            "title": "Requirements <br>review",
            "objectives": "Agree on the goal.",
            "details": "<li>Call</li>",
            "estimated": "1 week",
        },
        {
            "step": 2,
            "title": "Design",
            "objectives": "Lay out the page.",
            "details": "<li>Wireframe</li>",
            "estimated": "2 weeks",
        },
    ],
    "faq": [
        {"question": "I want a website?", "answer": "Maybe.", "emphasis": "Ask us."},
        {"question": "How long?", "answer": "Six weeks.", "emphasis": ""},
        {"question": "Can I edit it?", "answer": "Yes.", "emphasis": "Easily."},
    ],
    "privacy": [{"title": "What we collect", "content": "<p>Only the form.</p>"}],
}


@pytest.fixture
def collections() -> dict[str, list[dict[str, typ.Any]]]:
    """Return a deep copy of the sample collections keyed by name."""
    return json.loads(json.dumps(COLLECTIONS))


@pytest.fixture
def bundle(collections: dict[str, list[dict[str, typ.Any]]]) -> ContentBundle:
    return ContentBundle.from_mapping(collections)


@pytest.fixture
def content_dir(
    tmp_path: Path, collections: dict[str, list[dict[str, typ.Any]]]
) -> Path:
    """Write every sample collection to its JSON file under ``tmp_path/data``."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    for name, filename in COLLECTION_FILES.items():
        (data_dir / filename).write_text(
            json.dumps(collections[name], ensure_ascii=False), encoding="utf-8"
        )
    return data_dir


@pytest.fixture
def shell_html() -> str:
    return SHELL_HTML


@pytest.fixture
def shell_path(tmp_path: Path) -> Path:
    path = tmp_path / "index.html"
    path.write_text(SHELL_HTML, encoding="utf-8")
    return path


@pytest.fixture
def seo() -> SeoConfig:
    return SeoConfig(
        name="IdeaFlask",
        url="https://ideaflask.example.com",
        description="Landing pages that convert.",
        keywords=["landing page", "web design"],
        author="IdeaFlask Studio",
        og_title="IdeaFlask | Landing Pages",
        image="https://ideaflask.example.com/img/og.jpg",
        telephone="+886-2-0000-0000",
        email="hello@ideaflask.example.com",
        service_name="IdeaFlask Design",
        service_description="Landing page design.",
    )


@pytest.fixture
def site_config_path(tmp_path: Path, shell_path: Path, content_dir: Path) -> Path:
    """Write a ``site.yaml`` pointing at the temporary shell and content."""
    path = tmp_path / "site.yaml"
    path.write_text(
        f"""
site:
  name: IdeaFlask
  url: https://ideaflask.example.com/
  description: Landing pages that convert.
  keywords: landing page, web design
  image: https://ideaflask.example.com/img/og.jpg
build:
  shell: {shell_path}
  content_dir: {content_dir}
  output: {tmp_path / "public" / "index.html"}
contact:
  recipient: hello@ideaflask.example.com
  smtp_port: "2525"
  use_tls: "no"
""".strip()
        + "\n",
        encoding="utf-8",
    )
    return path
