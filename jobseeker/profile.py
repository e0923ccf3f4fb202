"""Static user-preference profile, loaded from YAML."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from jobseeker.config import PROFILE_PATH
from jobseeker.log import get_logger

log = get_logger(__name__)


class ProfileError(Exception):
    """Profile file missing or malformed."""


def _strs(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]
    return tuple(str(v) for v in values if v is not None and str(v).strip())


@dataclass(frozen=True)
class Skills:
    primary: tuple[str, ...] = ()
    secondary: tuple[str, ...] = ()
    devops: tuple[str, ...] = ()

    @property
    def combined(self) -> tuple[str, ...]:
        return self.primary + self.secondary + self.devops


@dataclass(frozen=True)
class DealBreakers:
    equity_only: bool = True
    excluded_tech: tuple[str, ...] = ()


@dataclass(frozen=True)
class SearchDefaults:
    keywords: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()


@dataclass(frozen=True)
class Profile:
    name: str = ""
    title: str = ""
    target_titles: tuple[str, ...] = ()
    skills: Skills = field(default_factory=Skills)
    deal_breakers: DealBreakers = field(default_factory=DealBreakers)
    search: SearchDefaults = field(default_factory=SearchDefaults)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        skills = data.get("skills") or {}
        breakers = data.get("deal_breakers") or {}
        search = data.get("search") or {}
        if not isinstance(skills, dict) or not isinstance(breakers, dict):
            raise ProfileError("skills and deal_breakers must be mappings")

        return cls(
            name=str(data.get("name") or ""),
            title=str(data.get("title") or ""),
            target_titles=_strs(data.get("target_titles")),
            skills=Skills(
                primary=_strs(skills.get("primary")),
                secondary=_strs(skills.get("secondary")),
                devops=_strs(skills.get("devops")),
            ),
            deal_breakers=DealBreakers(
                equity_only=bool(breakers.get("equity_only", True)),
                excluded_tech=_strs(breakers.get("excluded_tech")),
            ),
            search=SearchDefaults(
                keywords=_strs(search.get("keywords")),
                locations=_strs(search.get("locations")),
            ),
        )


def load_profile(path: Path | str | None = None) -> Profile:
    path = Path(path or PROFILE_PATH)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ProfileError(f"Profile not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ProfileError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ProfileError(f"Profile {path} must be a mapping")

    profile = Profile.from_dict(data)
    log.debug("Loaded profile %r: %d target titles, %d skills",
              profile.name, len(profile.target_titles), len(profile.skills.combined))
    return profile
