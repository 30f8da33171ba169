"""Configuration for pricing constants, filesystem layout and runtime backends."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from rental_engine.core.models import AddOn, InsuranceTier


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass(frozen=True)
class PricingConfig:
    insurance_daily: Dict[InsuranceTier, float] = field(
        default_factory=lambda: {
            InsuranceTier.ESSENTIAL: 15.0,
            InsuranceTier.STANDARD: 25.0,
            InsuranceTier.ELITE: 40.0,
        }
    )
    add_on_daily: Dict[AddOn, float] = field(
        default_factory=lambda: {
            AddOn.GPS_UNIT: 5.0,
            AddOn.CHILD_SEAT: 8.0,
            AddOn.SECOND_DRIVER: 10.0,
        }
    )
    tax_rate: float = 0.18
    currency: str = "USD"


DEFAULT_PRICING = PricingConfig()


@dataclass(frozen=True)
class PathsConfig:
    root: Path
    data_dir: Path

    @staticmethod
    def from_root(root: Path) -> "PathsConfig":
        root = root.resolve()
        return PathsConfig(root=root, data_dir=root / "data")


def resolve_repo_root() -> Path:
    env_root = Path.cwd()
    for parent in [env_root] + list(env_root.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return env_root


def load_paths() -> PathsConfig:
    return PathsConfig.from_root(resolve_repo_root())


@dataclass(frozen=True)
class Settings:
    store_backend: str = "memory"
    notify_backend: str = "log"
    store_timeout: float = 5.0
    notify_timeout: float = 2.0
    store_path: Optional[Path] = None
    redis_url: str = "redis://localhost:6379/0"
    smtp_host: str = ""
    smtp_port: int = 25
    smtp_sender: str = "noreply@citycars.az"
    currency: str = "USD"


def load_settings() -> Settings:
    data_dir = load_paths().data_dir
    store_path = Path(_env("RENTAL_ENGINE_STORE_PATH", str(data_dir / "reservations.json")))
    return Settings(
        store_backend=_env("RENTAL_ENGINE_STORE_BACKEND", "memory").strip().lower(),
        notify_backend=_env("RENTAL_ENGINE_NOTIFY_BACKEND", "log").strip().lower(),
        store_timeout=float(_env("RENTAL_ENGINE_STORE_TIMEOUT", "5")),
        notify_timeout=float(_env("RENTAL_ENGINE_NOTIFY_TIMEOUT", "2")),
        store_path=store_path,
        redis_url=_env("RENTAL_ENGINE_REDIS_URL", "redis://localhost:6379/0"),
        smtp_host=_env("RENTAL_ENGINE_SMTP_HOST", ""),
        smtp_port=int(_env("RENTAL_ENGINE_SMTP_PORT", "25")),
        smtp_sender=_env("RENTAL_ENGINE_SMTP_SENDER", "noreply@citycars.az"),
        currency=_env("RENTAL_ENGINE_CURRENCY", "USD").strip().upper(),
    )
