import os
from pydantic import BaseModel

class Settings(BaseModel):
    # Basic
    ENV: str = os.getenv("ENV", "dev")
    CACHE_TTL_SECONDS: int = int(os.getenv("CACHE_TTL_SECONDS", "3600"))
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

    # Data providers
    GEO_PROVIDER: str = os.getenv("GEO_PROVIDER", "http")            # mock | http
    BAN_BASE_URL: str = os.getenv("BAN_BASE_URL", "https://api-adresse.data.gouv.fr")
    CADASTRE_PROVIDER: str = os.getenv("CADASTRE_PROVIDER", "http")  # mock | http
    CADASTRE_BASE_URL: str = os.getenv("CADASTRE_BASE_URL", "https://apicarto.ign.fr/api/cadastre")
    DVF_PROVIDER: str = os.getenv("DVF_PROVIDER", "http")            # mock | http
    DVF_BASE_URL: str = os.getenv("DVF_BASE_URL", "https://app.dvf.etalab.gouv.fr/api")
    DPE_PROVIDER: str = os.getenv("DPE_PROVIDER", "http")            # mock | http
    ADEME_BASE_URL: str = os.getenv("ADEME_BASE_URL", "https://data.ademe.fr/data-fair/api/v1")
    DPE_DATASET: str = os.getenv("DPE_DATASET", "dpe-france")
    DPE_MIN_GEO_SCORE: float = float(os.getenv("DPE_MIN_GEO_SCORE", "0.5"))

    # Security
    API_KEY: str | None = os.getenv("API_KEY")
    RATE_LIMIT_RPM: int = int(os.getenv("RATE_LIMIT_RPM", "60"))

    # CORS
    ALLOW_ORIGINS: str = os.getenv("ALLOW_ORIGINS", "*")

    # Cache
    USE_REDIS: bool = os.getenv("USE_REDIS", "false").lower() == "true"
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Metrics
    PROMETHEUS_ENABLED: bool = os.getenv("PROMETHEUS_ENABLED", "true").lower() == "true"

settings = Settings()
