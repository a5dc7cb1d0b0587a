from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"

DEFAULT_COF_FILE = DATA_DIR / "WMM2015v1.COF"
DEFAULT_GEOID_FILE = DATA_DIR / "WW15MGH.GRD"  # NGA EGM96 15' grid, not bundled

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

@dataclass
class ModelConfig:
    # Coefficient dataset (None = embedded default)
    cof_file: Optional[str] = None

    # Documented validity window of a WMM release
    validity_years: float = 5.0

    # Highest spherical harmonic degree published by the model
    max_degree: int = 12

@dataclass
class GeoidConfig:
    # EGM96 undulation grid in NGA WW15MGH.GRD format (None = data/WW15MGH.GRD)
    grid_file: Optional[str] = None

@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_file: Optional[str] = None

@dataclass
class Config:
    """Main configuration class."""
    model: ModelConfig = field(default_factory=ModelConfig)
    geoid: GeoidConfig = field(default_factory=GeoidConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def cof_path(self) -> Path:
        """Path of the coefficient dataset to load by default."""
        return Path(self.model.cof_file) if self.model.cof_file else DEFAULT_COF_FILE

    def geoid_path(self) -> Path:
        """Path of the geoid grid to load by default."""
        return Path(self.geoid.grid_file) if self.geoid.grid_file else DEFAULT_GEOID_FILE

# Create default configuration instance
DEFAULT_CONFIG = Config()

def get_config() -> Config:
    """Get configuration instance."""
    return DEFAULT_CONFIG

def set_config(config: Config):
    """Replace the default configuration sections with those of config."""
    DEFAULT_CONFIG.model = config.model
    DEFAULT_CONFIG.geoid = config.geoid
    DEFAULT_CONFIG.logging = config.logging

def set_cof_file(path: Optional[str]):
    """Set the default coefficient dataset."""
    DEFAULT_CONFIG.model.cof_file = path

def set_geoid_file(path: Optional[str]):
    """Set the default geoid grid file."""
    DEFAULT_CONFIG.geoid.grid_file = path

def validate_config(config: Config) -> List[str]:
    """
    Validate configuration values.
    Returns list of validation errors, empty if valid.
    """
    errors = []

    # Validate model configuration
    if config.model.validity_years <= 0:
        errors.append("Validity window must be positive")

    if not 1 <= config.model.max_degree <= 12:
        errors.append("Maximum degree must be between 1 and 12")

    if config.model.cof_file is not None and not Path(config.model.cof_file).is_file():
        errors.append(f"Coefficient file not found: {config.model.cof_file}")

    # Validate logging configuration
    if config.logging.level.upper() not in LOG_LEVELS:
        errors.append(f"Unknown logging level: {config.logging.level}")

    return errors

def load_config(config_file: str) -> Config:
    """Load and validate configuration from a YAML file."""
    with open(config_file, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Configuration file {config_file} must contain a mapping")

    try:
        config = Config(
            model=ModelConfig(**(raw.get("model") or {})),
            geoid=GeoidConfig(**(raw.get("geoid") or {})),
            logging=LoggingConfig(**(raw.get("logging") or {})),
        )
    except TypeError as e:
        raise ValueError(f"Invalid configuration in {config_file}: {e}") from e

    # Validate configuration
    errors = validate_config(config)
    if errors:
        raise ValueError(f"Configuration validation failed:\n" +
                        "\n".join(f"- {error}" for error in errors))

    return config
