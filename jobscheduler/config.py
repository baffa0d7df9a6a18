import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration class with common settings."""
    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE")

    # Scheduling defaults for a fresh session
    DEFAULT_DAILY_CAPACITY = float(os.environ.get("DEFAULT_DAILY_CAPACITY", "8"))
    DISPLAY_WEEKDAYS = int(os.environ.get("DISPLAY_WEEKDAYS", "10"))  # two working weeks
    SEED_DEMO_JOBS = _env_bool("SEED_DEMO_JOBS", True)

    # Optimizer (Ollama-compatible generate endpoint)
    OPTIMIZER_URL = os.environ.get("OPTIMIZER_URL", "http://localhost:11434")
    OPTIMIZER_MODEL = os.environ.get("OPTIMIZER_MODEL", "mistral")
    OPTIMIZER_TIMEOUT = float(os.environ.get("OPTIMIZER_TIMEOUT", "60"))

    # CORS configuration
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")


class LocalConfig(Config):
    """Configuration for local development."""
    ENV = "local"
    DEBUG = True


class SandboxConfig(Config):
    """Configuration for sandbox/staging environment."""
    ENV = "sandbox"
    DEBUG = False


class ProductionConfig(Config):
    """Configuration for production environment."""
    ENV = "production"
    DEBUG = False


class TestingConfig(Config):
    """Configuration for the test suite."""
    ENV = "testing"
    DEBUG = False
    TESTING = True
    SEED_DEMO_JOBS = False
    LOG_LEVEL = "WARNING"


def get_config():
    """Get the appropriate configuration class based on environment variable.
    
    Environment is determined by FLASK_ENV or ENVIRONMENT variable:
    - 'local' or 'development' -> LocalConfig
    - 'sandbox' or 'staging' -> SandboxConfig
    - 'production' or 'prod' -> ProductionConfig
    - 'testing' or 'test' -> TestingConfig
    
    Defaults to LocalConfig if not set.
    """
    env = (os.environ.get("FLASK_ENV") or os.environ.get("ENVIRONMENT", "local")).lower()
    
    if env in ["local", "development", "dev"]:
        return LocalConfig
    elif env in ["sandbox", "staging", "stage"]:
        return SandboxConfig
    elif env in ["production", "prod"]:
        return ProductionConfig
    elif env in ["testing", "test"]:
        return TestingConfig
    else:
        # Default to local for safety
        return LocalConfig
