"""Тесты для CLI (`sitemap_checker.cli`) с использованием click.testing.CliRunner.
Проверяют команды `check`, `parse`, `config`, `--version`, коды выхода и обработку ошибок.
"""
import asyncio
import importlib
import json

import pytest
from click.testing import CliRunner
from sitemap_checker.aggregator import ResultSet
from sitemap_checker.checker.models import CheckOutcome
from sitemap_checker.cli import cli
from sitemap_checker.engine import CheckRun
from sitemap_checker.report.summary import build_summary

cli_module = importlib.import_module("sitemap_checker.cli")

URLS = "https://example.com/ 2024-01-15 daily 1.0\nhttps://example.com/a 2024-01-14 weekly 0.5\n"


def fake_run(records, statuses):
    results = ResultSet(total=len(records))
    for record, status in zip(records, statuses):
        if status == "timeout":
            results.add(record, CheckOutcome.timeout(5000))
        else:
            results.add(record, CheckOutcome(status=status, status_text="", response_time_ms=10))
    results.finish()
    return CheckRun(results=results, summary=build_summary(results))


@pytest.fixture()
def patch_start_check(monkeypatch):
    """Патчим start_check: без сети, статусы задаются тестом."""
    calls = {}

    def install(statuses):
        async def fake_check(cfg, records, observer=None, **kwargs):
            calls["config"] = cfg
            calls["records"] = records
            return fake_run(records, statuses)

        monkeypatch.setattr(cli_module, "start_check", fake_check)
        return calls

    return install


@pytest.fixture()
def urls_file(tmp_path):
    path = tmp_path / "urls.txt"
    path.write_text(URLS, encoding="utf-8")
    return path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SitemapChecker" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "checker.json"
    cfg_file.write_text(json.dumps({"concurrent": 7, "timeout": 1500}), encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["concurrent"] == 7
    assert data["timeout"] == 1500


def test_bad_config_exits_1(tmp_path):
    cfg_file = tmp_path / "checker.yaml"
    cfg_file.write_text("concurrent: -1", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_check_success_exit_0(urls_file, patch_start_check):
    calls = patch_start_check([200, 301])
    result = CliRunner().invoke(cli, ["check", "-i", str(urls_file), "--quiet"])
    assert result.exit_code == 0
    assert "Total URLs: 2" in result.output
    assert "Result: PASSED" in result.output
    assert [r.url for r in calls["records"]] == ["https://example.com/", "https://example.com/a"]


def test_check_errors_exit_1(urls_file, patch_start_check):
    patch_start_check([200, 404])
    result = CliRunner().invoke(cli, ["check", "-i", str(urls_file), "--quiet"])
    assert result.exit_code == 1
    assert "Result: FAILED" in result.output


def test_check_timeouts_exit_1(urls_file, patch_start_check):
    patch_start_check([200, "timeout"])
    result = CliRunner().invoke(cli, ["check", "-i", str(urls_file), "--quiet"])
    assert result.exit_code == 1


def test_check_overrides_config(urls_file, patch_start_check):
    calls = patch_start_check([200, 200])
    result = CliRunner().invoke(
        cli,
        [
            "check", "-i", str(urls_file), "--quiet",
            "--concurrent", "3", "--timeout", "800", "--max-retries", "0",
            "--user-agent", "Bot/9", "--strategy", "pool",
        ],
    )
    assert result.exit_code == 0
    cfg = calls["config"]
    assert (cfg.concurrent, cfg.timeout, cfg.max_retries) == (3, 800, 0)
    assert cfg.user_agent == "Bot/9"
    assert cfg.strategy == "pool"


def test_check_sitemap_input(tmp_path, patch_start_check):
    calls = patch_start_check([200])
    sitemap = tmp_path / "sitemap.xml"
    sitemap.write_text(
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        "<url><loc>https://example.com/only</loc></url></urlset>",
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["check", "-s", str(sitemap), "--quiet"])
    assert result.exit_code == 0
    assert [r.url for r in calls["records"]] == ["https://example.com/only"]


def test_check_reports_written(urls_file, tmp_path, patch_start_check):
    patch_start_check([200, 200])
    out_json = tmp_path / "reports" / "check.json"
    out_html = tmp_path / "reports" / "check.html"
    result = CliRunner().invoke(
        cli, ["check", "-i", str(urls_file), "--quiet", "--json", str(out_json), "--html", str(out_html)]
    )
    assert result.exit_code == 0
    assert json.loads(out_json.read_text(encoding="utf-8"))["summary"]["success"] is True
    assert out_html.exists()


def test_check_missing_input_exits_1(tmp_path, patch_start_check):
    patch_start_check([])
    result = CliRunner().invoke(cli, ["check", "-i", str(tmp_path / "absent.txt")])
    assert result.exit_code == 1
    assert "Ошибка входных данных" in result.output


def test_check_empty_input_exits_1(tmp_path, patch_start_check):
    patch_start_check([])
    empty = tmp_path / "urls.txt"
    empty.write_text("# nothing here\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["check", "-i", str(empty)])
    assert result.exit_code == 1


def test_check_run_failure_exits_1(urls_file, monkeypatch):
    async def broken(cfg, records, observer=None, **kwargs):
        await asyncio.sleep(0)
        raise RuntimeError("event loop exploded")

    monkeypatch.setattr(cli_module, "start_check", broken)
    result = CliRunner().invoke(cli, ["check", "-i", str(urls_file)])
    assert result.exit_code == 1
    assert "Ошибка при проверке" in result.output


def test_parse_command(urls_file):
    result = CliRunner().invoke(cli, ["parse", "-i", str(urls_file), "--limit", "1"])
    assert result.exit_code == 0
    assert "1. https://example.com/" in result.output
    assert "... and 1 more URLs" in result.output


def test_check_forced_format(tmp_path, patch_start_check):
    calls = patch_start_check([200])
    urls = tmp_path / "urls.txt"
    urls.write_text(URLS + "https://example.com/b | 2024-01-13 | monthly\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["check", "-i", str(urls), "--format", "pipe", "--quiet"])
    assert result.exit_code == 0
    assert [r.url for r in calls["records"]] == ["https://example.com/b"]


def test_parse_unknown_format_rejected(urls_file):
    result = CliRunner().invoke(cli, ["parse", "-i", str(urls_file), "--format", "xml"])
    assert result.exit_code == 2
