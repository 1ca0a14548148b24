from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class Strategy(str, Enum):
    """Supported authentication strategies."""

    DEFAULT = "default"
    ANONYMOUS = "anonymous"
    STATIC_KEY_PAIR = "static_key_pair"
    CREDENTIALS_FILE = "credentials_file"
    NAMED_PROFILE = "named_profile"
    ASSUME_ROLE = "assume_role"
    ASSUME_ROLE_WITH_WEB_IDENTITY = "assume_role_with_web_identity"


ENV_PREFIX = "AWS_AUTH_"

# field name -> public configuration key
KEYS: dict[str, str] = {
    "use_default_credentials": "use-default-credentials",
    "use_anonymous_credentials": "use-anonymous-credentials",
    "access_key": "access-key",
    "secret_key": "secret-key",
    "credentials_file": "credentials-file-path",
    "profile_name": "profile-name",
    "assume_role_arn": "assume-role-arn",
    "assume_role_session_name": "assume-role-session-name",
    "assume_role_external_id": "assume-role-external-id",
    "assume_role_sts_endpoint": "assume-role-sts-endpoint",
    "assume_role_sts_region": "assume-role-sts-region",
    "assume_role_max_session_seconds": "assume-role-max-session-seconds",
    "assume_role_proxy_host": "assume-role-proxy-host",
    "assume_role_proxy_port": "assume-role-proxy-port",
    "web_identity_token_file": "web-identity-token-file-path",
}
FIELDS_BY_KEY: dict[str, str] = {key: name for name, key in KEYS.items()}


def _field_names(values: Mapping[str, Any]) -> dict[str, Any]:
    """Translate configuration keys (``profile-name``) to field names."""
    return {FIELDS_BY_KEY.get(k, k): v for k, v in values.items()}


class AuthParameters(BaseSettings):
    """The raw parameter set evaluated by the strategy resolver.

    Every value is kept as an unparsed string; booleans and integers are
    coerced during validation so that malformed input is reported as a
    violation rather than rejected here. Blank strings count as absent.

    Values can be passed by field name (``profile_name``) or by
    configuration key (``profile-name``). Constructed without arguments,
    the model reads ``AWS_AUTH_*`` environment variables only
    (e.g. ``AWS_AUTH_PROFILE_NAME``). Use :meth:`from_mapping` to build an
    instance from an explicit mapping without consulting the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    use_default_credentials: str | None = None
    use_anonymous_credentials: str | None = None
    access_key: str | None = None
    secret_key: SecretStr | None = None
    credentials_file: str | None = None
    profile_name: str | None = None
    assume_role_arn: str | None = None
    assume_role_session_name: str | None = None
    assume_role_external_id: str | None = None
    assume_role_sts_endpoint: str | None = None
    assume_role_sts_region: str | None = None
    assume_role_max_session_seconds: str | None = None
    assume_role_proxy_host: str | None = None
    assume_role_proxy_port: str | None = None
    web_identity_token_file: str | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings

    @model_validator(mode="before")
    @classmethod
    def _accept_keys(cls, data: Any) -> Any:
        """Allow hyphenated configuration keys as input."""
        if isinstance(data, Mapping):
            return _field_names(data)
        return data

    @field_validator("*", mode="before")
    @classmethod
    def _blank_as_absent(cls, v: Any) -> Any:
        """Strip surrounding whitespace and treat empty strings as unset."""
        if isinstance(v, SecretStr):
            v = v.get_secret_value()
        if isinstance(v, str):
            v = v.strip()
            return v or None
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, int):
            return str(v)
        return v

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "AuthParameters":
        """Build a parameter set from ``values`` only, ignoring the environment."""
        return _ExplicitParameters(**_field_names(values))

    def is_set(self, name: str) -> bool:
        """Return True if the field ``name`` holds a non-empty value."""
        return getattr(self, name) is not None

    def secret_key_value(self) -> str | None:
        return self.secret_key.get_secret_value() if self.secret_key else None


class _ExplicitParameters(AuthParameters):
    """Parameter set whose only source is the constructor arguments."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)
