"""
Configuration for Keel
Process-level settings read from the environment (and a .env file)
"""
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for Keel"""

    # Environment name: "development", "production", "testing"
    ENV: str = os.getenv("KEEL_ENV", "development")

    # Root of the application (config files, views)
    APP_PATH: str = os.getenv("KEEL_APP_PATH", os.getcwd())

    # Layered application config: base file + local override
    CONFIG_PATH: str = os.getenv("KEEL_CONFIG_PATH") or str(Path(APP_PATH) / "etc" / "config.json")
    LOCAL_CONFIG_PATH: str = os.getenv("KEEL_LOCAL_CONFIG_PATH") or str(Path(APP_PATH) / "etc" / "config.local.json")

    # API server configuration
    API_HOST: str = os.getenv("KEEL_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("KEEL_PORT", "8080"))

    # Debug mode (set KEEL_DEBUG=true to enable)
    DEBUG: bool = os.getenv("KEEL_DEBUG", "").lower() in ("true", "1", "yes")

    @classmethod
    def config_paths(cls) -> List[str]:
        """Base and override config paths, in merge order"""
        return [cls.CONFIG_PATH, cls.LOCAL_CONFIG_PATH]

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration"""
        from ..utils.logger import get_logger
        logger = get_logger(__name__)

        valid = True
        for path in cls.config_paths():
            if not Path(path).is_file():
                logger.error(f"Config file not found: {path}")
                valid = False
        return valid
