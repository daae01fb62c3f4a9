"""Tests for the ``landing`` CLI commands.

The command functions are called directly so exit codes surface as
``SystemExit`` and printed output can be captured with ``capsys``.
"""

from __future__ import annotations

import typing as typ

import pytest

from landing_pages import cli
from landing_pages._constants import COLLECTION_FILES, RENDER_MARKER_ATTR
from landing_pages.config import load_site_config

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_build_writes_output(
    site_config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(config=site_config_path)
    output = load_site_config(site_config_path).build.output
    assert output.exists(), "expected the build to write its output"
    assert RENDER_MARKER_ATTR in output.read_text(encoding="utf-8")
    assert "wrote" in capsys.readouterr().out, "expected the written path printed"


def test_build_fails_without_output_on_bad_content(
    site_config_path: Path, content_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (content_dir / COLLECTION_FILES["portfolio"]).write_text("oops", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.build(config=site_config_path)
    assert excinfo.value.code == 1, f"expected exit 1, got {excinfo.value.code}"
    output = load_site_config(site_config_path).build.output
    assert not output.exists(), "expected no output after a failed build"
    assert "portfolio" in capsys.readouterr().err, "expected the error on stderr"


def test_verify_passes_after_build(
    site_config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(config=site_config_path)
    cli.verify(config=site_config_path)
    out = capsys.readouterr().out
    assert "FAIL" not in out, f"expected every check to pass:\n{out}"


def test_verify_fails_when_page_missing(site_config_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.verify(config=site_config_path)
    assert excinfo.value.code == 1, "expected exit 1 for a missing page"


def test_verify_fails_on_bare_shell(site_config_path: Path, shell_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.verify(page=shell_path, config=site_config_path)
    assert excinfo.value.code == 1, "expected exit 1 when checks fail"


def test_hydrate_writes_hydrated_page(
    tmp_path: Path,
    site_config_path: Path,
    shell_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    output = tmp_path / "hydrated.html"
    cli.hydrate(page=shell_path, output=output, config=site_config_path)
    out = capsys.readouterr().out
    assert "faq: unrendered" in out, f"expected region states printed:\n{out}"
    assert "faq-item" in output.read_text(encoding="utf-8"), (
        "expected the hydrated page to contain FAQ entries"
    )


def test_hydrate_leaves_nothing_on_load_failure(
    tmp_path: Path, shell_path: Path, content_dir: Path
) -> None:
    (content_dir / COLLECTION_FILES["steps"]).unlink()
    output = tmp_path / "hydrated.html"
    with pytest.raises(SystemExit):
        cli.hydrate(page=shell_path, output=output, source=str(content_dir))
    assert not output.exists(), "expected no output when content fails to load"


def test_verify_prints_advisories_without_failing(
    site_config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(config=site_config_path)
    cli.verify(config=site_config_path)
    out = capsys.readouterr().out
    assert "INFO page size" in out, f"expected the page size reported:\n{out}"
    assert 'keyword "IdeaFlask"' in out, f"expected the brand counted:\n{out}"
    assert "INFO headings h1=" in out, f"expected heading counts:\n{out}"


@pytest.mark.parametrize("command", ["build", "verify"])
def test_missing_config_fails_cleanly(
    tmp_path: Path, command: str, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        getattr(cli, command)(config=tmp_path / "absent.yaml")
    assert excinfo.value.code == 1, f"expected exit 1, got {excinfo.value.code}"
    err = capsys.readouterr().err
    assert err.startswith("error: invalid config"), f"unexpected stderr {err!r}"


def test_invalid_config_fails_cleanly(
    tmp_path: Path, shell_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "site.yaml"
    config.write_text("site:\n  name: Site\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.hydrate(page=shell_path, output=tmp_path / "out.html", config=config)
    assert excinfo.value.code == 1, f"expected exit 1, got {excinfo.value.code}"
    assert "url" in capsys.readouterr().err, "expected the missing field named"
    assert not (tmp_path / "out.html").exists(), "expected nothing written"
