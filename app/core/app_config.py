from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field


class StudioConfig(BaseModel):
    studio_name: str = "Estudio Fotografico"
    contact_email: str = "contato@estudio.local"
    contact_phone: str = "(11) 0000-0000"


class DashboardConfig(BaseModel):
    upcoming_title: str = "Proximas sessoes"


class AppJSONConfig(BaseModel):
    app_name: str = "Estudio Fotografico"
    workspace_subtitle: str = "Gestao de clientes e sessoes"
    studio: StudioConfig = Field(default_factory=StudioConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)


@lru_cache
def get_app_json_config() -> AppJSONConfig:
    path = Path("config/app_config.json")
    if not path.exists():
        return AppJSONConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except Exception:  # noqa: BLE001
        return AppJSONConfig()
    return AppJSONConfig.model_validate(raw)
