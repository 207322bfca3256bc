# === FILE: sitesweep/config.py ===
"""
Модуль для загрузки и валидации конфигурации SiteSweep.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "BrowserSettings",
    "ImagePolicy",
    "CrawlSettings",
    "ScanSettings",
    "ServerSettings",
    "SiteSweepConfig",
    "load_config",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
HEADLESS_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
]


class _Frozen(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class BrowserSettings(_Frozen):
    """Параметры запуска Chromium и общего browser context."""

    headless: bool = True
    args: List[str] = Field(default_factory=lambda: list(HEADLESS_ARGS))
    viewport_width: int = Field(1920, gt=0)
    viewport_height: int = Field(1080, gt=0)
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1)


class ImagePolicy(_Frozen):
    """How many images a page may contribute and how small they may be."""

    max_images: int = Field(10, ge=0)
    min_dimension: int = Field(50, ge=0, description="Минимальная ширина/высота (px).")


class CrawlSettings(_Frozen):
    """Limits of one deep crawl."""

    max_pages: int = Field(10, ge=0, description="Максимум подстраниц помимо стартовой.")
    concurrent_tabs: int = Field(3, ge=1, description="Вкладок в одном батче.")
    seed_timeout: float = Field(10.0, gt=0, description="Таймаут навигации стартовой страницы (с).")
    page_timeout: float = Field(8.0, gt=0, description="Таймаут навигации подстраницы (с).")
    settle_timeout: float = Field(3.0, ge=0, description="Ожидание networkidle, никогда не ошибка.")
    extraction_timeout: float = Field(2.0, ge=0, description="Запас на разбор DOM и закрытие вкладки (с).")
    crawl_deadline: float = Field(45.0, gt=0, description="Общий дедлайн обхода (с).")
    deadline_margin: float = Field(10.0, ge=0, description="Запас до дедлайна, после которого батчи не стартуют.")
    max_content_length: int = Field(3000, ge=0)
    min_phone_digits: int = Field(8, ge=1)
    images: ImagePolicy = Field(default_factory=ImagePolicy)
    harvest_images: ImagePolicy = Field(
        default_factory=lambda: ImagePolicy(max_images=5, min_dimension=200)
    )

    @property
    def batch_budget(self) -> float:
        """Seconds after which no new batch is started."""
        return self.crawl_deadline - self.deadline_margin


class ScanSettings(_Frozen):
    """Single-page audit settings."""

    navigation_timeout: float = Field(30.0, gt=0)
    settle_timeout: float = Field(30.0, ge=0)
    screenshot_quality: int = Field(60, ge=0, le=100)
    deadline: float = Field(75.0, gt=0, description="Внешний дедлайн одного аудита (с).")


class ServerSettings(_Frozen):
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=0, le=65535)
    cors_origin: str = Field("*", min_length=1)


class SiteSweepConfig(_Frozen):
    """Полная конфигурация сервиса."""

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    crawl: CrawlSettings = Field(default_factory=CrawlSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    @model_validator(mode="after")
    def _check_deadline(self) -> SiteSweepConfig:
        if self.crawl.deadline_margin > self.crawl.crawl_deadline:
            raise ValueError("crawl.deadline_margin must not exceed crawl.crawl_deadline")
        return self


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


def _env_overrides(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """PORT и FRONTEND_URL имеют приоритет над файлом, как в исходном сервисе."""
    server = dict(data.get("server") or {})
    if environ.get("PORT"):
        server["port"] = environ["PORT"]
    if environ.get("FRONTEND_URL"):
        server["cors_origin"] = environ["FRONTEND_URL"]
    if server:
        data = {**data, "server": server}
    return data


def load_config(
    path: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SiteSweepConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект SiteSweepConfig.
    Без пути используется configs/default.yaml, а если его нет, значения по умолчанию.
    """
    environ = os.environ if environ is None else environ
    data: dict[str, Any] = {}

    if path is None:
        path_obj: Optional[Path] = _DEFAULT_CFG if _DEFAULT_CFG.is_file() else None
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    if path_obj is not None:
        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return SiteSweepConfig(**_env_overrides(data, environ))
