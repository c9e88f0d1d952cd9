"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conceptforge.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch, button_template) -> Path:
    """Temporary working directory holding a button template."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "button.json").write_text(json.dumps(button_template))
    (tmp_path / "card.json").write_text(
        json.dumps({"template": button_template, "component": {"name": "Card"}})
    )
    return tmp_path


class TestRender:
    def test_render_to_stdout(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["render", "button.json", "--name", "Btn"])

        assert result.exit_code == 0
        assert '<div className="btn">Hi</div>' in result.stdout
        assert "export default Btn;" in result.stdout

    def test_render_to_directory(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(
            app, ["render", "button.json", "--name", "Btn", "--ts", "--output-dir", "out"]
        )

        assert result.exit_code == 0
        assert "✓" in result.stdout
        written = workdir / "out" / "Btn.tsx"
        assert written.exists()
        assert "const Btn = () => {" in written.read_text()

    def test_wrapper_component_names_the_file(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["render", "card.json", "-o", "out"])

        assert result.exit_code == 0
        assert (workdir / "out" / "Card.jsx").exists()

    def test_enhanced_render(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["render", "button.json", "--enhanced"])

        assert result.exit_code == 0
        assert "export default Component;" in result.stdout

    def test_render_vue_and_svelte(self, cli_runner: CliRunner, workdir: Path):
        vue = cli_runner.invoke(app, ["render", "button.json", "-f", "vue", "-n", "Btn"])
        svelte = cli_runner.invoke(app, ["render", "button.json", "-f", "svelte", "-o", "out"])

        assert vue.exit_code == 0
        assert "<template>\n  <div class=\"btn\">Hi</div>\n</template>" in vue.stdout
        assert svelte.exit_code == 0
        assert (workdir / "out" / "Component.svelte").read_text() == '<div class="btn">Hi</div>'

    def test_bem_styling_writes_scss(self, cli_runner: CliRunner, workdir: Path):
        bem = {"block": "panel", "styles": {"padding": "4px"}}
        (workdir / "panel.json").write_text(
            json.dumps([{"tag": "section", "extensions": {"bem": bem}}])
        )

        result = cli_runner.invoke(app, ["render", "panel.json", "-s", "bem", "-o", "out"])

        assert result.exit_code == 0
        assert (workdir / "out" / "Component.scss").read_text() == ".panel {\n  padding: 4px;\n}"

    def test_unknown_framework_fails(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["render", "button.json", "--framework", "solid"])

        assert result.exit_code == 1
        assert "not registered" in result.stdout

    def test_missing_template_fails(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["render", "absent.json"])

        assert result.exit_code == 1
        assert "Template not found" in result.stdout


class TestAnalyze:
    def test_analyze_table(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["analyze", "button.json"])

        assert result.exit_code == 0
        assert "attributes" in result.stdout
        assert "concept(s) total" in result.stdout

    def test_analyze_json(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["analyze", "button.json", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["structure"][0]["tag"] == "div"
        assert data["styling"]["static_classes"] == ["btn"]


class TestValidateConfig:
    def test_valid_config(self, cli_runner: CliRunner, workdir: Path):
        (workdir / "kit.yaml").write_text(
            "name: kit\nversion: 1.0.0\ncapabilities:\n  frameworks: [react]\n  styling: [css]\n"
        )

        result = cli_runner.invoke(app, ["validate-config", "kit.yaml"])

        assert result.exit_code == 0
        assert "kit.yaml is valid" in result.stdout

    def test_invalid_config(self, cli_runner: CliRunner, workdir: Path):
        (workdir / "kit.yaml").write_text("name: kit\n")

        result = cli_runner.invoke(app, ["validate-config", "kit.yaml"])

        assert result.exit_code == 1
        assert "✗ In kit.yaml: Config missing required field: version" in result.stdout

    def test_missing_config(self, cli_runner: CliRunner, workdir: Path):
        result = cli_runner.invoke(app, ["validate-config", "absent.yaml"])

        assert result.exit_code == 1
        assert "Config file not found" in result.stdout


def test_frameworks_command(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["frameworks"])

    assert result.exit_code == 0
    assert "Framework Extensions" in result.stdout
    assert "react" in result.stdout


def test_version_option(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "conceptforge" in result.stdout


def test_version_without_installed_distribution(monkeypatch):
    from importlib.metadata import PackageNotFoundError

    from conceptforge import _version

    def missing(name):
        raise PackageNotFoundError(name)

    monkeypatch.setattr(_version, "version", missing)

    assert _version.get_version() == "0.0.0"
