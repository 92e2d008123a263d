from __future__ import annotations
import yaml
from pathlib import Path
from typing import List
from pydantic import BaseModel, Field

class AppConfig(BaseModel):
    name: str
    environment: str = "dev"

class DBConfig(BaseModel):
    url: str

class StorageConfig(BaseModel):
    root: str = "."
    upload_dir: str = "uploads"
    max_upload_mb: int = 5
    allowed_extensions: List[str] = Field(default_factory=lambda: [".xlsx", ".xlsm"])

class CurriculumConfig(BaseModel):
    title_prefix: str = "CAPAIAN PEMBELAJARAN"
    sheet_name_template: str = "ATP {subject} Fase {phase}"
    file_prefix: str = "cp_"

class Settings(BaseModel):
    app: AppConfig
    db: DBConfig
    storage: StorageConfig = Field(default_factory=StorageConfig)
    curriculum: CurriculumConfig = Field(default_factory=CurriculumConfig)

def load_settings(path: str | Path = Path(__file__).resolve().parents[1] / "config" / "settings.yaml") -> Settings:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return Settings(
        app=AppConfig(**data["app"]),
        db=DBConfig(**data["db"]),
        storage=StorageConfig(**(data.get("storage") or {})),
        curriculum=CurriculumConfig(**(data.get("curriculum") or {})),
    )
