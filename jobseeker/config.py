"""Load env configuration and filesystem locations."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from jobseeker.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
DATA_DIR: Path = ROOT_DIR / "data"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"
DB_PATH: Path = DATA_DIR / "jobs.db"


@dataclass(frozen=True)
class Settings:
    adzuna_app_id: str = ""
    adzuna_app_key: str = ""
    adzuna_country: str = "es"
    db_path: Path = DB_PATH
    profile_path: Path = PROFILE_PATH

    @property
    def has_adzuna_credentials(self) -> bool:
        return bool(self.adzuna_app_id and self.adzuna_app_key)


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def load_settings() -> Settings:
    settings = Settings(
        adzuna_app_id=get_env("ADZUNA_APP_ID"),
        adzuna_app_key=get_env("ADZUNA_APP_KEY"),
        adzuna_country=get_env("ADZUNA_COUNTRY", "es").lower() or "es",
        db_path=Path(get_env("JOBSEEKER_DB") or DB_PATH),
        profile_path=Path(get_env("JOBSEEKER_PROFILE") or PROFILE_PATH),
    )
    log.debug(
        "Settings: adzuna=%s country=%s db=%s",
        "SET" if settings.has_adzuna_credentials else "MISSING",
        settings.adzuna_country,
        settings.db_path,
    )
    return settings
