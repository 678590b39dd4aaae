"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class GreeterConfig(BaseSettings):
    """Greeter ledger configuration"""
    
    # Contract bootstrap
    initial_greeting: str = "Building Unstoppable Apps!!!"
    contract_address: str = "0x" + "00" * 19 + "aa"
    initial_owner: str = ""  # Empty = API starts uninitialized
    
    # Withdrawals ignore a failed transfer unless this is enabled
    strict_withdrawals: bool = False
    
    # Storage configuration
    storage_backend: str = "memory"  # memory or sqlite
    sqlite_path: str = "greeter_ledger.db"
    
    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout
    
    class Config:
        env_prefix = "GREETER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = GreeterConfig()


def get_config() -> GreeterConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> GreeterConfig:
    """Reload configuration from environment"""
    global config
    config = GreeterConfig()
    return config
