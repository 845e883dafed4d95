"""
Scriptorium settings.

A single flat ``Settings`` object reads every ``SCRIPTORIUM_*`` (and
``CORS_*``) variable from the environment or a local ``.env`` file. Code that
only needs one area uses the grouped views such as ``settings.auth`` or
``settings.execution``, which are also what tests build directly.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./scriptorium.db",
        alias="SCRIPTORIUM_DATABASE_URL",
        description="Async SQLAlchemy connection URL",
    )
    echo: bool = Field(default=False, alias="SCRIPTORIUM_DATABASE_ECHO", description="Echo SQL statements")
    create_tables: bool = Field(
        default=True,
        alias="SCRIPTORIUM_DATABASE_CREATE_TABLES",
        description="Create missing tables on startup (disable when Alembic owns the schema)",
    )

    model_config = {"populate_by_name": True}


class AuthConfig(BaseModel):
    """Password hashing and token signing configuration."""

    jwt_secret: str = Field(
        default="change-me-access-secret", alias="SCRIPTORIUM_JWT_SECRET", description="Access token signing key"
    )
    jwt_refresh_secret: str = Field(
        default="change-me-refresh-secret",
        alias="SCRIPTORIUM_JWT_REFRESH_SECRET",
        description="Refresh token signing key",
    )
    jwt_algorithm: str = Field(default="HS256", alias="SCRIPTORIUM_JWT_ALGORITHM", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60, alias="SCRIPTORIUM_ACCESS_TOKEN_EXPIRE_MINUTES", description="Access token lifetime in minutes"
    )
    refresh_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="SCRIPTORIUM_REFRESH_TOKEN_EXPIRE_MINUTES",
        description="Refresh token lifetime in minutes",
    )
    bcrypt_rounds: int = Field(default=12, alias="SCRIPTORIUM_BCRYPT_ROUNDS", description="bcrypt cost factor")
    cookie_secure: bool = Field(
        default=False, alias="SCRIPTORIUM_COOKIE_SECURE", description="Set the Secure flag on auth cookies"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Origins allowed to call the API")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Let browsers send cookies cross-origin"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Methods browsers may use"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Request headers browsers may send"
    )

    model_config = {"populate_by_name": True}


class UploadConfig(BaseModel):
    """Avatar upload configuration."""

    directory: str = Field(default="uploads", alias="SCRIPTORIUM_UPLOAD_DIR", description="Upload storage directory")
    max_avatar_bytes: int = Field(
        default=2 * 1024 * 1024, alias="SCRIPTORIUM_MAX_AVATAR_BYTES", description="Maximum avatar size in bytes"
    )

    model_config = {"populate_by_name": True}


class ExecutionConfig(BaseModel):
    """Code execution configuration."""

    timeout_seconds: float = Field(
        default=10.0, alias="SCRIPTORIUM_EXECUTION_TIMEOUT_SECONDS", description="Wall-clock limit per run"
    )
    compile_timeout_seconds: float = Field(
        default=30.0, alias="SCRIPTORIUM_EXECUTION_COMPILE_TIMEOUT_SECONDS", description="Wall-clock limit per compile"
    )
    max_output_bytes: int = Field(
        default=64 * 1024, alias="SCRIPTORIUM_EXECUTION_MAX_OUTPUT_BYTES", description="Per-stream output limit"
    )
    max_concurrency: int = Field(
        default=4, alias="SCRIPTORIUM_EXECUTION_MAX_CONCURRENCY", description="Simultaneous runs allowed"
    )
    work_dir: Optional[str] = Field(
        default=None, alias="SCRIPTORIUM_EXECUTION_WORK_DIR", description="Parent directory for per-run temp dirs"
    )
    python_command: str = Field(default="python3", alias="SCRIPTORIUM_EXECUTION_PYTHON_COMMAND")
    node_command: str = Field(default="node", alias="SCRIPTORIUM_EXECUTION_NODE_COMMAND")
    javac_command: str = Field(default="javac", alias="SCRIPTORIUM_EXECUTION_JAVAC_COMMAND")
    java_command: str = Field(default="java", alias="SCRIPTORIUM_EXECUTION_JAVA_COMMAND")
    gcc_command: str = Field(default="gcc", alias="SCRIPTORIUM_EXECUTION_GCC_COMMAND")
    gpp_command: str = Field(default="g++", alias="SCRIPTORIUM_EXECUTION_GPP_COMMAND")

    model_config = {"populate_by_name": True}


class AdminSeedConfig(BaseModel):
    """Credentials of the administrator created on startup."""

    email: Optional[str] = Field(default=None, alias="SCRIPTORIUM_ADMIN_EMAIL", description="Seed admin email")
    password: Optional[str] = Field(default=None, alias="SCRIPTORIUM_ADMIN_PASSWORD", description="Seed admin password")
    firstname: str = Field(default="Site", alias="SCRIPTORIUM_ADMIN_FIRSTNAME")
    lastname: str = Field(default="Admin", alias="SCRIPTORIUM_ADMIN_LASTNAME")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Flat settings bound to environment variable names.

    Variable names are case sensitive. Unknown variables are ignored.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", alias="SCRIPTORIUM_SERVER_HOST", description="Host to bind to")
    server_port: int = Field(default=8000, alias="SCRIPTORIUM_SERVER_PORT", description="Port to bind to")
    log_level: str = Field(
        default="INFO",
        alias="SCRIPTORIUM_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(default="detailed", alias="SCRIPTORIUM_LOG_FORMAT", description="simple, detailed or json")
    log_file_enabled: bool = Field(default=False, alias="SCRIPTORIUM_LOG_FILE_ENABLED")
    log_file_dir: str = Field(default="logs", alias="SCRIPTORIUM_LOG_FILE_DIR")

    # =====================================================================
    # Database
    # =====================================================================
    database_url: str = Field(default="sqlite+aiosqlite:///./scriptorium.db", alias="SCRIPTORIUM_DATABASE_URL")
    database_echo: bool = Field(default=False, alias="SCRIPTORIUM_DATABASE_ECHO")
    database_create_tables: bool = Field(default=True, alias="SCRIPTORIUM_DATABASE_CREATE_TABLES")

    # =====================================================================
    # Authentication
    # =====================================================================
    jwt_secret: str = Field(default="change-me-access-secret", alias="SCRIPTORIUM_JWT_SECRET")
    jwt_refresh_secret: str = Field(default="change-me-refresh-secret", alias="SCRIPTORIUM_JWT_REFRESH_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="SCRIPTORIUM_JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="SCRIPTORIUM_ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_minutes: int = Field(default=60 * 24 * 7, alias="SCRIPTORIUM_REFRESH_TOKEN_EXPIRE_MINUTES")
    bcrypt_rounds: int = Field(default=12, alias="SCRIPTORIUM_BCRYPT_ROUNDS")
    cookie_secure: bool = Field(default=False, alias="SCRIPTORIUM_COOKIE_SECURE")

    # =====================================================================
    # CORS
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Uploads
    # =====================================================================
    upload_dir: str = Field(default="uploads", alias="SCRIPTORIUM_UPLOAD_DIR")
    max_avatar_bytes: int = Field(default=2 * 1024 * 1024, alias="SCRIPTORIUM_MAX_AVATAR_BYTES")

    # =====================================================================
    # Code Execution
    # =====================================================================
    execution_timeout_seconds: float = Field(default=10.0, alias="SCRIPTORIUM_EXECUTION_TIMEOUT_SECONDS")
    execution_compile_timeout_seconds: float = Field(
        default=30.0, alias="SCRIPTORIUM_EXECUTION_COMPILE_TIMEOUT_SECONDS"
    )
    execution_max_output_bytes: int = Field(default=64 * 1024, alias="SCRIPTORIUM_EXECUTION_MAX_OUTPUT_BYTES")
    execution_max_concurrency: int = Field(default=4, alias="SCRIPTORIUM_EXECUTION_MAX_CONCURRENCY")
    execution_work_dir: Optional[str] = Field(default=None, alias="SCRIPTORIUM_EXECUTION_WORK_DIR")
    execution_python_command: str = Field(default="python3", alias="SCRIPTORIUM_EXECUTION_PYTHON_COMMAND")
    execution_node_command: str = Field(default="node", alias="SCRIPTORIUM_EXECUTION_NODE_COMMAND")
    execution_javac_command: str = Field(default="javac", alias="SCRIPTORIUM_EXECUTION_JAVAC_COMMAND")
    execution_java_command: str = Field(default="java", alias="SCRIPTORIUM_EXECUTION_JAVA_COMMAND")
    execution_gcc_command: str = Field(default="gcc", alias="SCRIPTORIUM_EXECUTION_GCC_COMMAND")
    execution_gpp_command: str = Field(default="g++", alias="SCRIPTORIUM_EXECUTION_GPP_COMMAND")

    # =====================================================================
    # Seed Administrator
    # =====================================================================
    admin_email: Optional[str] = Field(default=None, alias="SCRIPTORIUM_ADMIN_EMAIL")
    admin_password: Optional[str] = Field(default=None, alias="SCRIPTORIUM_ADMIN_PASSWORD")
    admin_firstname: str = Field(default="Site", alias="SCRIPTORIUM_ADMIN_FIRSTNAME")
    admin_lastname: str = Field(default="Admin", alias="SCRIPTORIUM_ADMIN_LASTNAME")

    # =====================================================================
    # Grouped views
    # =====================================================================

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration from environment variables."""
        return DatabaseConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def auth(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        return AuthConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Cross-origin policy for the API."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def uploads(self) -> UploadConfig:
        """Get upload configuration from environment variables."""
        return UploadConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def execution(self) -> ExecutionConfig:
        """Get code execution configuration from environment variables."""
        return ExecutionConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def admin_seed(self) -> AdminSeedConfig:
        """Get seed administrator configuration from environment variables."""
        return AdminSeedConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
