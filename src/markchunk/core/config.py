from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import SplitOptions


class Settings(BaseSettings):
    # Chunk sizing (characters)
    MAX_CHARS: int = 2048
    MIN_CHARS: int = 500
    OVERLAP: int = 256
    HEADER_LEVELS: List[int] = [1, 2]
    CODE_BLOCK_MAX_CHARS: Optional[int] = None  # Default: 2x MAX_CHARS

    # Fence handling
    PRESERVE_CODE_BLOCKS: bool = True
    FALLBACK_CLOSE_ON_NESTED_OPEN: bool = True

    # Output shaping
    ID_PREFIX: str = ""
    TRIM: bool = True

    # Observability
    LOG_FORMAT: str = "auto"  # json|plain|auto
    LOG_LEVEL: str = "info"

    model_config = SettingsConfigDict(
        env_prefix="MARKCHUNK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        config_path: Optional[Path]
        if config_file:
            config_path = Path(config_file)
        else:
            # Auto-discover .markchunk.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".markchunk.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        # Load config file if found
        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # File keys may be written in lower case; env vars still win
        file_values = {str(k).upper(): v for k, v in config_data.items()}
        env_values = cls().model_dump(exclude_unset=True)
        return cls(**{**file_values, **env_values})

    def split_options(self, **overrides: Any) -> SplitOptions:
        """Build validated split options from these settings plus overrides."""
        data: Dict[str, Any] = {
            "max_chars": self.MAX_CHARS,
            "min_chars": self.MIN_CHARS,
            "overlap": self.OVERLAP,
            "header_levels": tuple(self.HEADER_LEVELS),
            "code_block_max_chars": self.CODE_BLOCK_MAX_CHARS,
            "preserve_code_blocks": self.PRESERVE_CODE_BLOCKS,
            "fallback_close_on_nested_open": self.FALLBACK_CLOSE_ON_NESTED_OPEN,
            "id_prefix": self.ID_PREFIX,
            "trim": self.TRIM,
        }
        data.update(overrides)
        return SplitOptions.build(**data)


# Default settings - will be replaced by load_config() during CLI startup
SETTINGS = Settings()
