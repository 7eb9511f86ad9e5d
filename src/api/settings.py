"""Process configuration, read once from the environment (.env supported)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

PRODUCTION = "production"


def load_env_file() -> None:
    """Load .env from repo root (when run from repo root or from Docker)."""
    for path in (
        Path(__file__).resolve().parent.parent.parent / ".env",
        Path.cwd() / ".env",
    ):
        if path.exists():
            load_dotenv(path)
            break


@dataclass(frozen=True)
class Settings:
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    environment: str = "development"
    cors_origins: tuple[str, ...] = ("*",)

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            neo4j_uri=os.environ.get("NEO4J_URI", cls.neo4j_uri).strip(),
            neo4j_user=os.environ.get("NEO4J_USER", cls.neo4j_user).strip(),
            neo4j_password=os.environ.get("NEO4J_PASSWORD", cls.neo4j_password).strip(),
            environment=os.environ.get("CONTACTBOOK_ENV", cls.environment).strip().lower(),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
        )
