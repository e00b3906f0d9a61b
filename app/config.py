"""
Application configuration
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""
    
    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    API_TITLE: str = "Staticpack Patch Map API"
    API_VERSION: str = "0.1.0"
    
    # Patch map defaults
    DEPS_LIB_DIR: str = "/opt/staticpack/deps/lib"
    PATCH_MAP_OUTPUT_ROOT: str = "/files/artifacts/patch_map"
    
    # Logging
    LOG_LEVEL: str = "INFO"
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
