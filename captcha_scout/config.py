# === FILE: captcha_scout/config.py ===
"""
Загрузка и валидация конфигурации CaptchaScout.
Схема описана через Pydantic; файл может быть YAML или JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

AUTH_TERMS: Tuple[str, ...] = (
    "login",
    "signin",
    "sign-in",
    "register",
    "signup",
    "sign-up",
    "auth",
    "account",
    "verification",
    "verify",
    "captcha",
)

SCRIPT_HINTS: Tuple[str, ...] = ("captcha", "security")

ENTERPRISE_MARKERS: Tuple[str, ...] = ("recaptcha/enterprise", "grecaptcha.enterprise")


class ScoutConfig(BaseModel):
    """Параметры одного обхода сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_pages: int = Field(10, ge=1, description="Бюджет: максимум различных страниц за обход.")
    timeout: float = Field(10.0, gt=0, description="Таймаут загрузки страницы (секунд).")
    script_timeout: float = Field(5.0, gt=0, description="Таймаут загрузки внешнего скрипта (секунд).")
    max_redirects: int = Field(5, ge=0, description="Лимит редиректов на один запрос.")
    retry_times: int = Field(0, ge=0, description="Число повторных попыток при 5xx/429.")
    user_agent: str = Field(BROWSER_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    auth_terms: Tuple[str, ...] = Field(AUTH_TERMS, description="Подстроки 'auth'-ссылок для обхода.")
    script_hints: Tuple[str, ...] = Field(SCRIPT_HINTS, description="Подстроки src, при которых скрипт скачивается.")
    enterprise_markers: Tuple[str, ...] = Field(
        ENTERPRISE_MARKERS, description="Маркеры reCAPTCHA Enterprise в HTML страницы."
    )
    fetch_external_scripts: bool = Field(True, description="Скачивать ли внешние скрипты.")
    dedup_key: Literal["identifier", "composite"] = Field(
        "identifier", description="Ключ итоговой дедупликации записей."
    )

    @field_validator("auth_terms", "script_hints", "enterprise_markers", mode="after")
    @classmethod
    def _lower_terms(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        terms = tuple(t.strip().lower() for t in v if t and t.strip())
        if not terms:
            raise ValueError("list must contain at least one non-empty term")
        return terms


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


def load_config(path: Union[str, Path, None] = None) -> ScoutConfig:
    """
    Читает YAML или JSON и возвращает проверенный ScoutConfig.
    Без пути берёт configs/default.yaml, а если его нет, значения по умолчанию.
    Явно указанный, но отсутствующий файл даёт FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ScoutConfig()
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

    return ScoutConfig(**data)


__all__ = [
    "ScoutConfig",
    "load_config",
    "AUTH_TERMS",
    "SCRIPT_HINTS",
    "ENTERPRISE_MARKERS",
    "BROWSER_USER_AGENT",
]
