"""sitemap_checker.parser: источники входных записей (текстовый список и sitemap.xml)."""

from sitemap_checker.parser.line_parser import ParseResult, parse_line, parse_lines
from sitemap_checker.parser.sitemap_parser import parse_sitemap, sitemap_records

__all__ = ["ParseResult", "parse_line", "parse_lines", "parse_sitemap", "sitemap_records"]
