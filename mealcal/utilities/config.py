"""Configuration management for the meal calendar application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# AI recipe generation (OpenAI)
OPENAI_API_KEY: Final[str] = os.getenv('OPENAI_API_KEY', '')
OPENAI_TEXT_MODEL: Final[str] = os.getenv('OPENAI_TEXT_MODEL', 'gpt-4o-mini')
OPENAI_VISION_MODEL: Final[str] = os.getenv('OPENAI_VISION_MODEL', 'gpt-4o-mini')
OPENAI_MAX_TOKENS: Final[int] = int(os.getenv('OPENAI_MAX_TOKENS', '1000'))

# Image search (Unsplash)
UNSPLASH_ACCESS_KEY: Final[str] = os.getenv('UNSPLASH_ACCESS_KEY', '')
UNSPLASH_TIMEOUT: Final[float] = float(os.getenv('UNSPLASH_TIMEOUT', '10'))

# Meal plan behaviour (see DUPLICATE_POLICIES / UNREGISTER_POLICIES in constants)
DUPLICATE_POLICY: Final[str] = os.getenv('MEALCAL_DUPLICATE_POLICY', 'allow').lower()
UNREGISTER_POLICY: Final[str] = os.getenv('MEALCAL_UNREGISTER_POLICY', 'orphan').lower()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('MEALCAL_DATA_DIR', str(BASE_DIR / 'data'))).resolve()
