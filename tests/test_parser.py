# File: tests/test_parser.py
import pytest

from sitemap_checker.engine import InputError, load_records
from sitemap_checker.parser.line_parser import parse_line, parse_lines
from sitemap_checker.parser.sitemap_parser import parse_sitemap, sitemap_records

URL_LIST = """# Format: URL DATE FREQUENCY [PRIORITY]

https://www.example.com/ 2024-01-15T10:00:00Z daily 1.0
https://www.example.com/products 2024-01-14T15:30:00Z weekly
https://www.example.com/docs | 2024-01-10T09:30:00Z | weekly | 0.7
https://www.example.com/support,2024-01-09T16:45:00Z,monthly,0.6
just-one-token
"""

SITEMAP = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://www.example.com/</loc><lastmod>2024-01-15</lastmod></url>
  <url><loc>
    https://www.example.com/about
  </loc></url>
  <url><loc></loc></url>
</urlset>
"""


@pytest.mark.parametrize(
    "line,fmt,url,lastmod,changefreq,priority",
    [
        ("https://a.com/ 2024-01-15 daily 1.0", "standard", "https://a.com/", "2024-01-15", "daily", 1.0),
        ("https://a.com/x 2024-01-15 weekly", "standard", "https://a.com/x", "2024-01-15", "weekly", None),
        ("https://a.com/y | 2024-01-10 | weekly | 0.7", "pipe", "https://a.com/y", "2024-01-10", "weekly", 0.7),
        ("https://a.com/z,2024-01-09,monthly,0.6", "csv", "https://a.com/z", "2024-01-09", "monthly", 0.6),
        ("https://a.com/z, 2024-01-09, monthly", "csv", "https://a.com/z", "2024-01-09", "monthly", None),
    ],
)
def test_parse_line_formats(line, fmt, url, lastmod, changefreq, priority):
    record = parse_line(line, 3)
    assert record.url == url
    assert record.lastmod == lastmod
    assert record.changefreq == changefreq
    assert record.priority == priority
    assert record.source.format == fmt
    assert record.source.line == 3


def test_parse_line_rejects_garbage():
    with pytest.raises(ValueError):
        parse_line("just-one-token", 1)


def test_parse_lines_counts():
    result = parse_lines(URL_LIST)
    assert result.total == 5
    assert result.success == 4
    assert len(result.errors) == 1
    assert [r.url for r in result.records] == [
        "https://www.example.com/",
        "https://www.example.com/products",
        "https://www.example.com/docs",
        "https://www.example.com/support",
    ]


def test_parse_sitemap_locs():
    assert parse_sitemap(SITEMAP) == ["https://www.example.com/", "https://www.example.com/about"]
    assert parse_sitemap("") == []
    records = sitemap_records(SITEMAP)
    assert records[0].url == "https://www.example.com/"
    assert records[0].lastmod is None


def test_load_records_from_files(tmp_path):
    urls = tmp_path / "urls.txt"
    urls.write_text(URL_LIST, encoding="utf-8")
    sitemap = tmp_path / "sitemap.xml"
    sitemap.write_text(SITEMAP, encoding="utf-8")

    assert len(load_records(input_path=urls)) == 4
    assert len(load_records(sitemap_path=sitemap)) == 2


@pytest.mark.parametrize("content", ["", "# only comments\n\n", "garbage\n"])
def test_load_records_empty_is_fatal(tmp_path, content):
    path = tmp_path / "urls.txt"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(InputError):
        load_records(input_path=path)


def test_load_records_missing_file(tmp_path):
    with pytest.raises(InputError):
        load_records(input_path=tmp_path / "nope.txt")


def test_load_records_needs_exactly_one_source(tmp_path):
    with pytest.raises(InputError):
        load_records()
    with pytest.raises(InputError):
        load_records(input_path=tmp_path / "a", sitemap_path=tmp_path / "b")


@pytest.mark.parametrize(
    "fmt,expected",
    [
        ("auto", ["https://www.example.com/", "https://www.example.com/products",
                  "https://www.example.com/docs", "https://www.example.com/support"]),
        ("pipe", ["https://www.example.com/docs"]),
        ("csv", ["https://www.example.com/support"]),
    ],
)
def test_parse_lines_forced_format(fmt, expected):
    result = parse_lines(URL_LIST, fmt=fmt)
    assert [r.url for r in result.records] == expected
    assert all(fmt in ("auto", r.source.format) for r in result.records)
    assert result.total == 5


def test_forced_format_rejects_other_layouts():
    with pytest.raises(ValueError):
        parse_line("https://a.com/ 2024-01-15 daily 1.0", 1, fmt="csv")
    with pytest.raises(ValueError):
        parse_lines(URL_LIST, fmt="yaml")


def test_load_records_passes_format(tmp_path):
    urls = tmp_path / "urls.txt"
    urls.write_text(URL_LIST, encoding="utf-8")
    assert [r.url for r in load_records(input_path=urls, fmt="pipe")] == ["https://www.example.com/docs"]
