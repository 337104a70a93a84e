# File: sitemap_checker/parser/sitemap_parser.py
"""sitemap_checker.parser.sitemap_parser: Извлечение URL из тегов <loc> файла sitemap.xml."""

from __future__ import annotations

from typing import List

from lxml import etree

from sitemap_checker.checker.models import URLRecord


def parse_sitemap(xml_content: str) -> List[str]:
    """Разбирает XML content sitemap и возвращает список URL из тегов <loc>.

    Args:
        xml_content: строка с содержимым sitemap.xml.

    Returns:
        Список URL, найденных в <loc> тегах. Пустой документ даёт пустой список.

    Пример:
    ```python
    from sitemap_checker.parser.sitemap_parser import parse_sitemap

    with open('sitemap.xml', encoding='utf-8') as f:
        content = f.read()
    urls = parse_sitemap(content)
    print(urls)
    ```
    """
    if not xml_content.strip():
        return []
    parser = etree.XMLParser(ns_clean=True, recover=True)
    root = etree.fromstring(xml_content.encode("utf-8"), parser=parser)
    if root is None:
        return []
    locs = root.findall(".//{*}loc")
    return [loc.text.strip() for loc in locs if loc.text and loc.text.strip()]


def sitemap_records(xml_content: str) -> List[URLRecord]:
    """Как parse_sitemap, но сразу в виде URLRecord без метаданных."""
    return [URLRecord(url=url) for url in parse_sitemap(xml_content)]
