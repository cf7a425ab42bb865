from .provider import (
    APIConfig,
    AuthConfig,
    CFConfig,
    ConfigProvider,
    EnvConfigProvider,
    RedisConfig,
    RegistryConfig,
)

__all__ = [
    "APIConfig",
    "AuthConfig",
    "CFConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "RedisConfig",
    "RegistryConfig",
]
