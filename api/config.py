"""Configuration management using Pydantic Settings."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden using environment variables or .env file.
    """

    # Neo4j Entity Store Configuration
    neo4j_uri: str = Field(
        default="bolt://localhost:7687",
        description="Neo4j database connection URI"
    )
    neo4j_user: str = Field(
        default="neo4j",
        description="Neo4j username"
    )
    neo4j_password: str = Field(
        ...,
        description="Neo4j password (required)"
    )
    neo4j_database: Optional[str] = Field(
        default=None,
        description="Neo4j database name; the server default when unset"
    )
    neo4j_pool_size: int = Field(
        default=50,
        ge=4,
        description="Maximum Neo4j connection pool size"
    )

    # API Configuration
    api_key: Optional[str] = Field(
        default=None,
        description="API key for authentication. If not set, authentication is disabled (dev mode)"
    )

    # Application Settings
    app_name: str = Field(
        default="FleetOps API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode flag"
    )

    # Dashboard
    recent_trips_limit: int = Field(
        default=3,
        ge=0,
        description="Number of trips shown in the dashboard's recent trips panel"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: str = Field(
        default="logs/api.log",
        description="Path to log file"
    )

    class Config:
        """Pydantic config."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

        # Allow extra fields from environment
        extra = "ignore"

        json_schema_extra = {
            "example": {
                "neo4j_uri": "bolt://localhost:7687",
                "neo4j_user": "neo4j",
                "neo4j_password": "secure_password",
                "api_key": "your_api_key_here",
                "recent_trips_limit": 3,
                "log_level": "INFO"
            }
        }


# Create a singleton instance
settings = Settings()
