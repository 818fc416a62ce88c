"""
CORS setup.

The mock API is called from a browser frontend on another origin, so
every environment allows a fixed set of origins plus ``FRONTEND_URL``
and anything listed in ``CORS_ALLOWED_ORIGINS``.
"""

import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


@dataclass
class CORSConfig:
    """Options passed straight to CORSMiddleware."""

    allowed_origins: List[str] = field(default_factory=list)

    # Bearer tokens travel in the Authorization header
    allow_credentials: bool = True

    allowed_methods: List[str] = field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allowed_headers: List[str] = field(
        default_factory=lambda: ["Accept", "Authorization", "Content-Type", "X-Request-ID"]
    )

    # Readable by frontend JS
    expose_headers: List[str] = field(
        default_factory=lambda: [
            "X-Request-ID",
            "X-Rate-Limit-Remaining",
            "X-Rate-Limit-Reset",
            "Retry-After",
        ]
    )

    preflight_max_age: int = 3600


ENVIRONMENT_ORIGINS = {
    "development": [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    "staging": ["https://staging.snafles.com"],
    "production": ["https://snafles.com", "https://www.snafles.com"],
}


def _split_origins(raw: str) -> Iterable[str]:
    return (origin.strip() for origin in raw.split(",") if origin.strip())


def get_cors_config(
    environment: Optional[str] = None,
    frontend_url: Optional[str] = None,
) -> CORSConfig:
    """Build the origin list for an environment. Unknown environments get the development list."""
    environment = environment or os.getenv("SNAFLES_ENV", "development")

    origins = list(ENVIRONMENT_ORIGINS.get(environment, ENVIRONMENT_ORIGINS["development"]))
    for origin in [frontend_url or "", *_split_origins(os.getenv("CORS_ALLOWED_ORIGINS", ""))]:
        if origin and origin not in origins:
            origins.append(origin)

    return CORSConfig(
        allowed_origins=origins,
        preflight_max_age=7200 if environment == "production" else 3600,
    )


def setup_cors(app: FastAPI, config: Optional[CORSConfig] = None) -> None:
    """Add CORSMiddleware to the app. Loads the config from the environment when none is given."""
    config = config or get_cors_config()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=config.allow_credentials,
        allow_methods=config.allowed_methods,
        allow_headers=config.allowed_headers,
        expose_headers=config.expose_headers,
        max_age=config.preflight_max_age,
    )
