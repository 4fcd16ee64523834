from enum import Enum
from typing import Optional

from apscheduler.util import astimezone
from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class StoreBackend(str, Enum):
    """Supported integration store backends."""

    MEMORY = "memory"
    REDIS = "redis"


class LogLevel(str, Enum):
    """Supported logging levels."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"
    NOTSET = "NOTSET"


class TestEnvironment(BaseSettings):
    """
    Test-specific environment settings.
    """

    model_config = SettingsConfigDict(
        env_file="./test/.env.test",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Skip .env loading entirely (set by the test suite)
    cheer_no_env_file: bool = Field(default=False, alias="CHEER_NO_ENV_FILE")


class SettingModel(BaseSettings):
    """
    Configuration model for the cheer bot.
    Loads values from environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Public URL of this service, used to build the OAuth redirect URI
    base_url: str = Field(default="http://localhost:3000")
    port: int = Field(default=3000, ge=1, le=65535)

    # Slack app credentials
    slack_client_id: Optional[str] = Field(default=None)
    slack_client_secret: Optional[SecretStr] = Field(default=None)
    slack_signing_secret: Optional[SecretStr] = Field(default=None)
    slack_scopes: str = Field(default="chat:write:bot,channels:history,incoming-webhook")

    # Image provider
    unsplash_access_key: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("UNSPLASH_ACCESS_KEY", "UNSPLASH_APP_ID")
    )
    image_query: str = Field(default="animals")
    image_orientation: str = Field(default="squarish")
    image_width: int = Field(default=400, gt=0)
    image_height: int = Field(default=500, gt=0)
    http_timeout: float = Field(default=10.0, gt=0)

    # Integration store settings
    store_backend: StoreBackend = Field(default=StoreBackend.MEMORY)
    redis_url: Optional[str] = Field(default=None)
    redis_key_prefix: str = Field(default="slack_cheer")

    # Only react to messages posted in the channel chosen at install time
    restrict_to_installed_channel: bool = Field(default=True)

    # Seconds given to queued work on shutdown
    queue_shutdown_timeout: float = Field(default=10.0, ge=0)

    # Daily broadcast
    broadcast_enabled: bool = Field(default=True)
    broadcast_hour: int = Field(default=7, ge=0, le=23)
    broadcast_minute: int = Field(default=0, ge=0, le=59)
    broadcast_timezone: str = Field(default="UTC")

    # Logging settings
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_file: Optional[str] = Field(default=None)
    log_dir: str = Field(default="logs")
    log_format: str = Field(default="%(asctime)s [%(levelname)8s] %(name)s: %(message)s")

    # Web server CORS settings
    cors_allow_origins: str = Field(default="*")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: str = Field(default="*")
    cors_allow_headers: str = Field(default="*")

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def parse_cors_values(cls, v):
        """Parse comma separated CORS values, treating blanks as a wildcard."""
        if isinstance(v, str):
            # Handle empty string
            if not v.strip():
                return "*"
            return v.strip()
        return v or "*"

    @field_validator("broadcast_timezone")
    @classmethod
    def check_timezone(cls, v):
        """Reject time zone names the broadcast scheduler cannot resolve."""
        try:
            astimezone(v)
        except (KeyError, ValueError) as e:
            raise ValueError(f"Unknown time zone '{v}'") from e
        return v

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Drop a trailing slash so route paths can be appended directly."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @property
    def oauth_redirect_uri(self) -> str:
        """Redirect URI registered with Slack for the install flow."""
        return f"{self.base_url}/oauth"

    @property
    def scopes(self) -> list[str]:
        """OAuth scopes requested at install time."""
        return [scope.strip() for scope in self.slack_scopes.split(",") if scope.strip()]

    @staticmethod
    def split_csv(value: str) -> list[str]:
        """Split a comma separated setting into a list."""
        return [part.strip() for part in value.split(",") if part.strip()]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize the settings sources to prioritize .env file over environment variables.
        This matches the previous behavior of load_dotenv(override=True).
        """
        return init_settings, dotenv_settings, env_settings, file_secret_settings


_settings: Optional[SettingModel] = None
_test_env: Optional[TestEnvironment] = None


def get_settings(
    env_file: Optional[str] = ".env", no_env_file: bool = False, force_reload: bool = False, **kwargs
) -> SettingModel:
    """
    Get the global settings instance.

    Parameters
    ----------
    env_file : Optional[str], optional
        Path to the .env file, by default ".env"
    no_env_file : bool, optional
        Whether to skip loading the .env file, by default False
    force_reload : bool, optional
        Whether to force a reload of the settings, by default False
    **kwargs
        Additional settings to override

    Returns
    -------
    SettingModel
        The settings instance
    """
    global _settings

    # Check if we should skip .env loading based on test environment settings
    test_env = get_test_environment()
    if test_env.cheer_no_env_file:
        no_env_file = True

    if _settings is None or force_reload:
        actual_env_file = None if no_env_file else env_file
        _settings = SettingModel(_env_file=actual_env_file, **kwargs)
    return _settings


def get_test_environment(force_reload: bool = False) -> TestEnvironment:
    """
    Get the test environment settings instance.

    Parameters
    ----------
    force_reload : bool, optional
        Whether to force a reload of the test environment settings, by default False

    Returns
    -------
    TestEnvironment
        The test environment settings instance
    """
    global _test_env

    if _test_env is None or force_reload:
        _test_env = TestEnvironment()
    return _test_env

