# src/config/settings.py
from dataclasses import dataclass
from typing import Mapping, Optional
import os

# Valor de APP_ENV que liga as chamadas reais ao ATS
PRODUCTION = "production"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    relay_secret: str = ""
    ats_api_key: str = ""
    ats_contact_url: str = ""
    ats_application_url: str = ""
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Lê o ambiente uma única vez; o resultado é passado explicitamente aos componentes."""
    env = os.environ if environ is None else environ

    port = env.get("PORT", "3000")
    try:
        port_val = int(port)
    except ValueError:
        # porta inválida: mantém default
        port_val = 3000

    return Settings(
        host=env.get("HOST", "0.0.0.0"),
        port=port_val,
        relay_secret=env.get("JOBBOARD_API_KEY", ""),
        ats_api_key=env.get("ATS_API_KEY", ""),
        ats_contact_url=env.get("ATS_CONTACT_URL", ""),
        ats_application_url=env.get("ATS_APPLICATION_URL", ""),
        environment=env.get("APP_ENV", "development"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
