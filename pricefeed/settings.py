import ssl
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # Load environment variables from .env file

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 3000
    tick_interval: float = 1.0
    static_dir: Path = PACKAGE_DIR / "public"
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def secure(self) -> bool:
        return bool(self.ssl_certfile and self.ssl_keyfile)

    def ssl_context(self) -> Optional[ssl.SSLContext]:
        """TLS context for the standalone WebSocket server, None when not secure"""
        if not self.secure:
            return None
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(self.ssl_certfile, self.ssl_keyfile)
        return context


@lru_cache()
def get_settings() -> Settings:
    return Settings()
