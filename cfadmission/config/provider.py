"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import List, Optional, Protocol

REGISTRY_BACKENDS = ("redis", "memory")


@dataclass
class CFConfig:
    """Cloud Foundry layout configuration."""
    root_namespace: str


@dataclass
class RegistryConfig:
    """Claim store configuration."""
    backend: str
    stuck_claim_metric_ttl: Optional[int]


@dataclass
class RedisConfig:
    """Redis connection configuration."""
    host: str
    port: int
    db: int
    password: Optional[str]

    @property
    def url(self) -> str:
        # Password is passed separately to avoid URL encoding issues
        return f"redis://{self.host}:{self.port}/{self.db}"


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    log_level: str
    tls_cert_file: Optional[str]
    tls_key_file: Optional[str]

    @property
    def tls_enabled(self) -> bool:
        return bool(self.tls_cert_file and self.tls_key_file)


@dataclass
class AuthConfig:
    """Operator endpoint authentication configuration."""
    api_keys: List[str]

    @property
    def enabled(self) -> bool:
        return bool(self.api_keys)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_cf_config(self) -> CFConfig:
        ...

    def get_registry_config(self) -> RegistryConfig:
        ...

    def get_redis_config(self) -> RedisConfig:
        ...

    def get_api_config(self) -> APIConfig:
        ...

    def get_auth_config(self) -> AuthConfig:
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_cf_config(self) -> CFConfig:
        """Get the root namespace; the webhook cannot place orgs without it."""
        root_namespace = os.getenv("CF_ROOT_NAMESPACE", "").strip()
        if not root_namespace:
            raise ValueError(
                "CF_ROOT_NAMESPACE environment variable is required. "
                "Set it to the namespace that holds CFOrg objects, e.g. cf"
            )
        return CFConfig(root_namespace=root_namespace)

    def get_registry_config(self) -> RegistryConfig:
        backend = os.getenv("REGISTRY_BACKEND", "redis").strip().lower()
        if backend not in REGISTRY_BACKENDS:
            raise ValueError(
                f"REGISTRY_BACKEND must be one of {', '.join(REGISTRY_BACKENDS)}, got {backend!r}"
            )

        ttl = os.getenv("STUCK_CLAIM_METRIC_TTL")
        return RegistryConfig(
            backend=backend,
            stuck_claim_metric_ttl=int(ttl) if ttl else None,
        )

    def get_redis_config(self) -> RedisConfig:
        return RedisConfig(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            db=int(os.getenv("REDIS_DB", "0")),
            password=os.getenv("REDIS_PASSWORD") or None,
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "9443")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            tls_cert_file=os.getenv("TLS_CERT_FILE") or None,
            tls_key_file=os.getenv("TLS_KEY_FILE") or None,
        )

    def get_auth_config(self) -> AuthConfig:
        # Without keys the operator endpoints reject every request
        api_keys = os.getenv("API_KEYS", "").split(",")
        return AuthConfig(api_keys=[key.strip() for key in api_keys if key.strip()])
