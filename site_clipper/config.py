"""
Модуль для загрузки и валидации настроек обхода SiteClipper.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer


class CrawlOptions(BaseModel):
    """Настройки одного рекурсивного обхода сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(2, ge=0, description="Максимальная глубина обхода ссылок.")
    max_pages: int = Field(50, ge=1, description="Жесткий лимит по числу обработанных страниц.")
    same_domain_only: bool = Field(True, description="Обходить только хост стартового адреса.")
    exclude_patterns: List[re.Pattern[str]] = Field(
        default_factory=list, description="Регулярные выражения для исключения адресов."
    )
    include_patterns: List[re.Pattern[str]] = Field(
        default_factory=list, description="Если заданы, адрес должен совпасть хотя бы с одним."
    )
    delay_between_requests: float = Field(1.0, ge=0, description="Пауза между страницами (секунд).")
    request_timeout: float = Field(15.0, gt=0, description="Таймаут на один запрос (секунд).")
    strategy_delay: float = Field(0.5, ge=0, description="Пауза перед следующей стратегией (секунд).")
    use_fallback_strategies: bool = Field(True, description="Перебирать запасные профили запроса.")
    include_images: bool = Field(False, description="Сохранять изображения как ![alt](src).")
    min_content_length: int = Field(100, ge=0, description="Минимальная длина текста страницы.")
    extra_headers: Dict[str, str] = Field(
        default_factory=dict, description="Заголовки поверх заголовков каждой стратегии."
    )

    @field_serializer("exclude_patterns", "include_patterns")
    def _patterns_as_text(self, patterns: List[re.Pattern[str]]) -> List[str]:
        return [p.pattern for p in patterns]


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_options(path: Union[str, Path, None]) -> CrawlOptions:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlOptions.
    Без пути использует configs/default.yaml, а при его отсутствии значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlOptions()
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

    return CrawlOptions(**data)


__all__ = ["CrawlOptions", "load_options", "ValidationError"]
