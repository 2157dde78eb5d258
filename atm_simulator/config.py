"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class ATMConfig(BaseSettings):
    """ATM simulator configuration"""

    # Persistence configuration
    data_file: str = "users.json"
    storage_backend: str = "json"  # json or memory
    seed_defaults: bool = True  # Insert demo accounts when nothing was loaded

    # Money configuration
    currency: str = "INR"

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8090

    class Config:
        env_prefix = "ATM_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = ATMConfig()


def get_config() -> ATMConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> ATMConfig:
    """Reload configuration from environment"""
    global config
    config = ATMConfig()
    return config
