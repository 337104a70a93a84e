"""sitemap_checker.checker: проверка доступности URL (транспорт, повторы, планировщик)."""
