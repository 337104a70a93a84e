# === FILE: sitemap_checker/config.py ===
"""
Модуль для загрузки и валидации конфигурации проверки URL.
Используется Pydantic для описания схемы и проверки данных.
Все длительности задаются в миллисекундах.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Literal, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SitemapChecker/1.0)"


class CheckerConfig(BaseModel):
    """Конфигурация для одного запуска проверки."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    concurrent: int = Field(10, ge=1, description="Макс. число одновременных проверок.")
    timeout: int = Field(5000, gt=0, description="Таймаут одной попытки (мс).")
    max_retries: int = Field(
        2, ge=0, alias="maxRetries", description="Число повторных попыток для временных сбоев."
    )
    user_agent: str = Field(
        DEFAULT_USER_AGENT, min_length=1, alias="userAgent", description="Заголовок User-Agent."
    )
    retry_backoff: int = Field(
        1000, ge=0, alias="retryBackoff", description="Шаг линейной задержки между попытками (мс)."
    )
    chunk_pause: int = Field(
        100, ge=0, alias="chunkPause", description="Пауза между группами проверок (мс)."
    )
    slow_threshold: int = Field(
        3000, gt=0, alias="slowThreshold", description="Порог «медленного» ответа (мс)."
    )
    progress_every: int = Field(
        50, ge=1, alias="progressEvery", description="Шаг вывода прогресса (записей)."
    )
    max_timeout_ratio: float = Field(
        0.10, ge=0, le=1, alias="maxTimeoutRatio", description="Допустимая доля таймаутов."
    )
    strategy: Literal["batch", "pool"] = Field(
        "batch", description="batch — группы с барьером, pool — непрерывный пул воркеров."
    )

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000


_DEFAULT_CFG = Path("configs/checker.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CheckerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CheckerConfig.
    Без явного пути берёт configs/checker.yaml, а если его нет — значения по умолчанию.
    Явно указанный, но отсутствующий файл даёт FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CheckerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CheckerConfig(**data)


def apply_overrides(config: CheckerConfig, overrides: Dict[str, Any]) -> CheckerConfig:
    """Возвращает копию конфига с непустыми значениями из overrides (опции CLI)."""
    update = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return config
    # model_copy не валидирует, поэтому собираем модель заново
    return CheckerConfig(**{**config.model_dump(), **update})
