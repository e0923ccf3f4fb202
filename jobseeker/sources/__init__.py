from __future__ import annotations

from typing import Callable

from .base import JobSource
from .adzuna import AdzunaSource
from .arbeitnow import ArbeitnowSource
from .himalayas import HimalayasSource
from .remoteok import RemoteOKSource
from .remotive import RemotiveSource
from .weworkremotely import WeWorkRemotelySource
from .workingnomads import WorkingNomadsSource

from jobseeker.config import Settings
from jobseeker.log import get_logger
from jobseeker.ratelimit import RateGate

log = get_logger(__name__)

__all__ = [
    "JobSource", "AdzunaSource", "ArbeitnowSource", "HimalayasSource",
    "RemoteOKSource", "RemotiveSource", "WeWorkRemotelySource", "WorkingNomadsSource",
    "SOURCE_INFO", "Registry", "build_registry",
]

Registry = dict[str, Callable[[], JobSource]]

# Minimum seconds between two requests to the same source.
_SPACING: dict[str, float] = {
    "adzuna": 0.5,
    "remoteok": 0.5,
    "arbeitnow": 0.5,
    "weworkremotely": 0.5,
    "himalayas": 0.3,
    "workingnomads": 0.5,
    "remotive": 0.3,
}

SOURCE_INFO: dict[str, dict] = {
    "adzuna": {
        "name": "Adzuna",
        "description": "Job search engine for Spain and Europe",
        "requires_auth": True,
        "locations": ["Spain", "UK", "Germany", "France", "Europe"],
        "job_types": ["All types"],
    },
    "remoteok": {
        "name": "RemoteOK",
        "description": "Remote jobs from companies worldwide",
        "requires_auth": False,
        "locations": ["Remote/Global"],
        "job_types": ["Remote only"],
    },
    "arbeitnow": {
        "name": "Arbeitnow",
        "description": "European tech jobs",
        "requires_auth": False,
        "locations": ["Europe", "Germany", "Remote EU"],
        "job_types": ["Tech/Software"],
    },
    "weworkremotely": {
        "name": "We Work Remotely",
        "description": "Curated remote jobs from top companies",
        "requires_auth": False,
        "locations": ["Remote/Global"],
        "job_types": ["Remote only", "Programming", "Design", "DevOps"],
    },
    "himalayas": {
        "name": "Himalayas",
        "description": "Remote job board with a paginated JSON API",
        "requires_auth": False,
        "locations": ["Remote/Global"],
        "job_types": ["Remote only"],
    },
    "workingnomads": {
        "name": "Working Nomads",
        "description": "Remote job board with a JSON feed",
        "requires_auth": False,
        "locations": ["Remote/Global"],
        "job_types": ["Remote only"],
    },
    "remotive": {
        "name": "Remotive",
        "description": "Remote tech jobs with a public JSON API",
        "requires_auth": False,
        "locations": ["Remote/Global"],
        "job_types": ["Remote only", "Software", "DevOps", "Data"],
    },
}


def _gate(name: str) -> RateGate:
    return RateGate(_SPACING.get(name, 0.5))


def build_registry(settings: Settings) -> Registry:
    """Name -> factory map, in the order ``"all"`` runs them."""
    registry: Registry = {
        "adzuna": lambda: AdzunaSource(
            settings.adzuna_app_id, settings.adzuna_app_key,
            country=settings.adzuna_country, gate=_gate("adzuna"),
        ),
        "remoteok": lambda: RemoteOKSource(_gate("remoteok")),
        "arbeitnow": lambda: ArbeitnowSource(_gate("arbeitnow")),
        "weworkremotely": lambda: WeWorkRemotelySource(_gate("weworkremotely")),
        "himalayas": lambda: HimalayasSource(_gate("himalayas")),
        "workingnomads": lambda: WorkingNomadsSource(_gate("workingnomads")),
        "remotive": lambda: RemotiveSource(_gate("remotive")),
    }
    if not settings.has_adzuna_credentials:
        log.info("Adzuna credentials missing — adzuna will return no jobs")
    return registry
