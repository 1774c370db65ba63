import pytest
from click.testing import CliRunner

from storefront.cli import cli


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DEPLOYMENT_MODE", "local-dev")
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.setenv("FILE_SERVICE_TEMP_FILE_BASE_DIRECTORY", str(tmp_path / "work"))
    monkeypatch.setenv("FILE_SERVICE_MAX_GENERATED_DIRECTORY_DEPTH", "2")
    return tmp_path


@pytest.fixture
def source_dir(tmp_path):
    source = tmp_path / "site"
    (source / "a").mkdir(parents=True)
    (source / "a" / "b.txt").write_text("nested")
    (source / "c.txt").write_text("top level")
    return source


def test_show_config(cli_env):
    result = CliRunner().invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert "Deployment Mode: local-dev" in result.output
    assert "Max Generated Directory Depth: 2" in result.output


def test_publish_promotes_and_cleans_up(cli_env, source_dir):
    result = CliRunner().invoke(cli, ["publish", str(source_dir)])

    assert result.exit_code == 0, result.output
    storage = cli_env / "storage"
    assert (storage / "a" / "b.txt").read_text() == "nested"
    assert (storage / "c.txt").read_text() == "top level"
    assert list((cli_env / "work").iterdir()) == []


def test_publish_for_tenant_keeps_tenant_directory(cli_env, source_dir):
    result = CliRunner().invoke(cli, ["publish", str(source_dir), "--tenant-id", "7"])

    assert result.exit_code == 0, result.output
    assert (cli_env / "storage" / "c.txt").exists()
    assert len(list((cli_env / "work").glob("*/site-7"))) == 1


def test_remove(cli_env, source_dir):
    runner = CliRunner()
    runner.invoke(cli, ["publish", str(source_dir)])

    first = runner.invoke(cli, ["remove", "/c.txt"])
    second = runner.invoke(cli, ["remove", "/c.txt"])

    assert first.exit_code == 0
    assert "Removed /c.txt" in first.output
    assert second.exit_code == 1
    assert not (cli_env / "storage" / "c.txt").exists()


def test_html_to_text(tmp_path):
    html_file = tmp_path / "order.html"
    html_file.write_text('<p>Hello <a href="http://x">there</a></p>', encoding="utf-8")

    result = CliRunner().invoke(cli, ["html-to-text", str(html_file)])

    assert result.exit_code == 0
    assert result.output == "Hello there <http://x>\n"


def test_remove_rejects_names_outside_storage(cli_env):
    victim = cli_env / "victim.txt"
    victim.write_text("precious")

    result = CliRunner().invoke(cli, ["remove", "../victim.txt"])

    assert result.exit_code == 1
    assert "outside the storage directory" in result.output
    assert victim.read_text() == "precious"
