"""
Server configuration, read from the environment.

Variables:
    TXID_ZKP_HOST          Bind address (default 127.0.0.1)
    TXID_ZKP_PORT          Bind port (default 5010)
    TXID_ZKP_CORS_ORIGINS  Comma-separated allowed origins (default "*")
    TXID_ZKP_LOG_LEVEL     Logging level name (default INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class ServerConfig:
    """
    Args:
        host:          Interface uvicorn binds to
        port:          TCP port uvicorn listens on
        cors_origins:  Origins allowed by the CORS middleware
        log_level:     Root logging level
    """
    host: str = "127.0.0.1"
    port: int = 5010
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ServerConfig:
        port = os.getenv("TXID_ZKP_PORT", "5010")
        try:
            port_number = int(port)
        except ValueError:
            raise ValueError(f"TXID_ZKP_PORT must be an integer, got '{port}'") from None
        origins = os.getenv("TXID_ZKP_CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("TXID_ZKP_HOST", "127.0.0.1"),
            port=port_number,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("TXID_ZKP_LOG_LEVEL", "INFO").upper(),
        )
