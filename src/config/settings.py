"""
Configuration settings for the area suggestion tooling.
Load configuration from environment variables or a project .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


class Settings:
    """Application settings loaded from environment variables."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    DATA_DIR = Path(os.getenv('DATA_DIR', str(PROJECT_ROOT / 'data')))
    RAW_DATA_DIR = DATA_DIR / 'raw'
    PROCESSED_DATA_DIR = DATA_DIR / 'processed'

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = Path(os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs')))

    # ============================================================================
    # Batch file names (area-suggest CLI defaults)
    # ============================================================================
    PURCHASES_FILE = os.getenv('PURCHASES_FILE', 'purchases.csv')
    AREAS_FILE = os.getenv('AREAS_FILE', 'areas.csv')
    HOSPITALS_FILE = os.getenv('HOSPITALS_FILE', 'hospitals.csv')
    SUGGESTIONS_FILE = os.getenv('SUGGESTIONS_FILE', 'area_suggestions.csv')

    @classmethod
    def default_input_path(cls, file_name: str) -> Path:
        """Path of an input extract under RAW_DATA_DIR."""
        return cls.RAW_DATA_DIR / file_name

    @classmethod
    def default_output_path(cls) -> Path:
        """Path of the suggestions file under PROCESSED_DATA_DIR."""
        return cls.PROCESSED_DATA_DIR / cls.SUGGESTIONS_FILE


# Create settings instance
settings = Settings()
