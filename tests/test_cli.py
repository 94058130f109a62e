"""Tests for the rubymine-configurator CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from rubymine_configurator import cli
from rubymine_configurator.cli import app
from rubymine_configurator.config.loader import CONFIG_FILENAME
from rubymine_configurator.document import parse
from rubymine_configurator.environment import DetectionError, RubyEnvironment

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    """An empty project dir named ``widget-api`` used as cwd, with an isolated HOME."""
    root = tmp_path / "widget-api"
    root.mkdir()
    monkeypatch.chdir(root)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("DB_HOST", "DB_PORT", "DB_USER"):
        monkeypatch.delenv(var, raising=False)
    return root


@pytest.fixture
def ide_dir(tmp_path: Path, monkeypatch) -> Path:
    config_dir = tmp_path / "RubyMine2024.1"
    monkeypatch.setattr(cli, "find_config_dir", lambda product: config_dir)
    return config_dir


@pytest.fixture
def fake_ruby(monkeypatch):
    env = RubyEnvironment(
        wrapper_path="/opt/dev/shims/ruby",
        interpreter_path="/opt/rubies/3.3.1/bin/ruby",
        version="3.3.1",
    )
    monkeypatch.setattr(cli, "detect_ruby", lambda: env)
    monkeypatch.setattr(cli, "find_shadowenv", lambda: "/opt/dev/bin/shadowenv")
    monkeypatch.setattr(cli, "_today", lambda: "2024-06-01")
    return env


def _jdk_names(path: Path) -> list[str]:
    return [jdk.find("name").get("value") for jdk in parse(path.read_text()).root.iter("jdk")]


# ── interpreter ──────────────────────────────────────────────────────


class TestInterpreterCommand:
    def test_creates_jdk_table(self, project, ide_dir, fake_ruby):
        result = runner.invoke(app, ["interpreter"])

        assert result.exit_code == 0, result.output
        assert "Interpreter created successfully" in result.output
        table = ide_dir / "options" / "jdk.table.xml"
        assert _jdk_names(table) == ["Ruby 3.3.1 (shadowenv/widget-api) 2024-06-01"]

    def test_rerun_replaces_and_backs_up(self, project, ide_dir, fake_ruby):
        runner.invoke(app, ["interpreter"])
        result = runner.invoke(app, ["interpreter"])

        assert result.exit_code == 0, result.output
        table = ide_dir / "options" / "jdk.table.xml"
        assert len(_jdk_names(table)) == 1
        backups = list((ide_dir / "options").glob("jdk.table.backup.*.xml"))
        assert len(backups) == 1

    def test_dry_run_writes_nothing(self, project, ide_dir, fake_ruby):
        result = runner.invoke(app, ["interpreter", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "# Interpreter name: Ruby 3.3.1 (shadowenv/widget-api) 2024-06-01" in result.output
        assert '<component name="ProjectJdkTable">' in result.output
        assert not (ide_dir / "options").exists()

    def test_configured_marker_and_shadowenv(self, project, ide_dir, fake_ruby, tmp_path):
        config = tmp_path / "c.yaml"
        config.write_text(yaml.dump({
            "interpreter": {"marker": "managed", "shadowenv_path": "/custom/shadowenv"},
        }))
        result = runner.invoke(app, ["--config", str(config), "interpreter", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Ruby 3.3.1 (shadowenv/widget-api) + managed 2024-06-01" in result.output
        assert '<option value="/custom/shadowenv" />' in result.output

    def test_detection_failure_exits(self, project, ide_dir, monkeypatch):
        def no_ruby():
            raise DetectionError("Could not find ruby in PATH")

        monkeypatch.setattr(cli, "detect_ruby", no_ruby)
        result = runner.invoke(app, ["interpreter"])

        assert result.exit_code == 1
        assert "Could not find ruby" in result.output

    def test_malformed_table_left_untouched(self, project, ide_dir, fake_ruby):
        table = ide_dir / "options" / "jdk.table.xml"
        table.parent.mkdir(parents=True)
        table.write_text("<application><component>")

        result = runner.invoke(app, ["interpreter"])

        assert result.exit_code == 1
        assert table.read_text() == "<application><component>"


# ── test-args ────────────────────────────────────────────────────────


class TestTestArgsCommand:
    def _workspace(self, project: Path, text: str) -> Path:
        path = project / ".idea" / "workspace.xml"
        path.parent.mkdir()
        path.write_text(text)
        return path

    def test_updates_ruby_args(self, project, workspace_xml):
        path = self._workspace(project, workspace_xml)

        result = runner.invoke(app, ["test-args"])

        assert result.exit_code == 0, result.output
        assert "Updated RUBY_ARGS" in result.output
        value = next(
            e.get("VALUE") for e in parse(path.read_text()).root.iter("RTEST_RUN_CONFIG_SETTINGS_ID")
            if e.get("NAME") == "RUBY_ARGS"
        )
        cwd = Path.cwd()
        assert value == f"-I{cwd}/lib -I{cwd}/test -I{cwd}/spec -I{cwd}/test/support"

    def test_second_run_reports_up_to_date(self, project, workspace_xml):
        path = self._workspace(project, workspace_xml)
        runner.invoke(app, ["test-args"])
        before = path.read_text()

        result = runner.invoke(app, ["test-args"])

        assert "already up to date" in result.output
        assert path.read_text() == before

    def test_nothing_to_update(self, project):
        text = '<project version="4"><component name="RunManager" /></project>'
        path = self._workspace(project, text)

        result = runner.invoke(app, ["test-args"])

        assert result.exit_code == 0
        assert "Nothing updated" in result.output
        assert path.read_text() == text

    def test_missing_workspace(self, project):
        result = runner.invoke(app, ["test-args"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_explicit_workspace_dry_run(self, project, workspace_xml, tmp_path):
        path = tmp_path / "elsewhere.xml"
        path.write_text(workspace_xml)

        result = runner.invoke(app, ["test-args", "--workspace", str(path), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert f"-I{Path.cwd()}/lib" in result.output
        assert path.read_text() == workspace_xml


# ── datasource ───────────────────────────────────────────────────────


class TestDatasourceCommand:
    def test_creates_both_files(self, project, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.local")
        result = runner.invoke(app, ["datasource"])

        assert result.exit_code == 0, result.output
        descriptor = parse((project / ".idea" / "dataSources.xml").read_text())
        local = parse((project / ".idea" / "dataSources.local.xml").read_text())

        ds = descriptor.root.find("component/data-source")
        assert ds.get("name") == "widget-api@db.local"
        assert ds.findtext("jdbc-url") == "jdbc:mysql://db.local:3306"
        local_ds = local.root.find("component/data-source")
        assert local_ds.get("uuid") == ds.get("uuid")
        qnames = [n.get("qname") for n in local_ds.iter("node")]
        assert qnames == ["widget-api_development", "widget-api_test"]

    def test_rerun_keeps_uuid(self, project):
        runner.invoke(app, ["datasource", "--name", "main"])
        path = project / ".idea" / "dataSources.xml"
        first = parse(path.read_text()).root.find("component/data-source").get("uuid")

        result = runner.invoke(app, ["datasource", "--name", "main"])

        assert result.exit_code == 0, result.output
        sources = parse(path.read_text()).root.findall("component/data-source")
        assert len(sources) == 1
        assert sources[0].get("uuid") == first

    def test_dry_run_writes_nothing(self, project):
        result = runner.invoke(app, ["datasource", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "# Data source: widget-api@127.0.0.1" in result.output
        assert "dataSourceStorageLocal" in result.output
        assert not (project / ".idea").exists()

    def test_unwritable_local_file_leaves_descriptor_untouched(self, project, tmp_path):
        runner.invoke(app, ["datasource"])
        descriptor = project / ".idea" / "dataSources.xml"
        before = descriptor.read_text()
        (project / "blocker").write_text("a regular file, not a directory")
        config = tmp_path / "c.yaml"
        config.write_text(yaml.dump({"datasource": {"local_file": "blocker/local.xml"}}))

        result = runner.invoke(app, ["--config", str(config), "datasource", "--name", "other"])

        assert result.exit_code == 1
        assert descriptor.read_text() == before
        assert not list((project / ".idea").glob("*.tmp"))

    def test_malformed_descriptor_exits(self, project):
        idea = project / ".idea"
        idea.mkdir()
        (idea / "dataSources.xml").write_text("<project>")

        result = runner.invoke(app, ["datasource"])

        assert result.exit_code == 1
        assert not (idea / "dataSources.local.xml").exists()


# ── config ───────────────────────────────────────────────────────────


class TestConfigCommands:
    def test_init_creates_template(self, project):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (project / CONFIG_FILENAME).is_file()

    def test_init_refuses_overwrite(self, project):
        (project / CONFIG_FILENAME).write_text("log_level: debug\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert (project / CONFIG_FILENAME).read_text() == "log_level: debug\n"

    def test_init_force(self, project):
        (project / CONFIG_FILENAME).write_text("log_level: debug\n")
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "datasource:" in (project / CONFIG_FILENAME).read_text()

    def test_show(self, project):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "workspace_file" in result.output

    def test_invalid_config_exits(self, project, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("datasource:\n  driver: oracle\n")
        result = runner.invoke(app, ["--config", str(bad), "config", "show"])
        assert result.exit_code == 1
        assert "Invalid config" in result.output
