from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import boto3
import botocore.session
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import AuthParameters, Strategy
from .endpoints import proxy_url, sts_endpoint_url
from .errors import CredentialProviderError
from .models import (
    AssumeRoleCredentials,
    CredentialDescriptor,
    ProxySettings,
    WebIdentityCredentials,
)
from .properties import parse_properties
from .resolver import resolve

logger = logging.getLogger(__name__)

ACCESS_KEY_PROPERTY = "accessKey"
SECRET_KEY_PROPERTY = "secretKey"


def get_session(
    params: AuthParameters | Mapping[str, Any] | None = None,
) -> boto3.Session:
    """Resolve ``params`` and construct a :class:`boto3.Session` for it.

    Args:
        params: Parameter set or mapping. If ``None``, parameters are read
            from ``AWS_AUTH_*`` environment variables.

    Returns:
        A session whose credentials follow the selected strategy.

    Raises:
        ConfigurationError: If the parameters are invalid.
        CredentialProviderError: If the backend cannot build credentials.
    """
    cfg = params if params is not None else AuthParameters()
    return build_session(resolve(cfg))


def build_session(descriptor: CredentialDescriptor) -> boto3.Session:
    """Construct a :class:`boto3.Session` for a resolved descriptor."""
    logger.info("Building AWS session for strategy %s", descriptor.strategy.value)

    match descriptor.strategy:
        case Strategy.ANONYMOUS:
            return _anonymous_session()
        case Strategy.STATIC_KEY_PAIR:
            return boto3.Session(
                aws_access_key_id=descriptor.access_key,
                aws_secret_access_key=descriptor.secret_key,
            )
        case Strategy.CREDENTIALS_FILE:
            access_key, secret_key = read_credentials_file(descriptor.path)
            return boto3.Session(
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
            )
        case Strategy.NAMED_PROFILE:
            try:
                return boto3.Session(profile_name=descriptor.profile_name)
            except BotoCoreError as e:
                raise CredentialProviderError(
                    f"AWS profile '{descriptor.profile_name}' could not be loaded: {e}"
                ) from e
        case Strategy.ASSUME_ROLE:
            return _assume_role_session(descriptor)
        case Strategy.ASSUME_ROLE_WITH_WEB_IDENTITY:
            return _web_identity_session(descriptor)
        case _:
            return boto3.Session()


def read_credentials_file(path: str | Path) -> tuple[str, str]:
    """Read an access key pair from a properties file.

    The file holds ``accessKey`` and ``secretKey`` entries in
    ``.properties`` syntax (see :func:`~.properties.parse_properties`).
    Surrounding whitespace is trimmed from both values.

    Args:
        path: Location of the properties file.

    Returns:
        A tuple ``(access_key, secret_key)``.

    Raises:
        CredentialProviderError: If the file cannot be read or lacks a key.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CredentialProviderError(
            f"Could not read credentials file {path}: {e}"
        ) from e

    try:
        properties = parse_properties(text)
    except ValueError as e:
        raise CredentialProviderError(
            f"Could not parse credentials file {path}: {e}"
        ) from e

    access_key = properties.get(ACCESS_KEY_PROPERTY, "").strip()
    secret_key = properties.get(SECRET_KEY_PROPERTY, "").strip()
    if not (access_key and secret_key):
        raise CredentialProviderError(
            f"Credentials file {path} must define {ACCESS_KEY_PROPERTY} "
            f"and {SECRET_KEY_PROPERTY}."
        )
    return access_key, secret_key


def _anonymous_session() -> boto3.Session:
    core = botocore.session.get_session()
    core.set_default_client_config(Config(signature_version=UNSIGNED))
    return boto3.Session(botocore_session=core)


def _sts_client(
    session: boto3.Session,
    *,
    region: str,
    endpoint: str | None,
    proxy: ProxySettings | None,
    unsigned: bool = False,
) -> Any:
    config_kwargs: dict[str, Any] = {}
    if proxy is not None:
        url = proxy_url(proxy.host, proxy.port)
        config_kwargs["proxies"] = {"http": url, "https": url}
    if unsigned:
        config_kwargs["signature_version"] = UNSIGNED

    client_kwargs: dict[str, Any] = {
        "region_name": region,
        "config": Config(**config_kwargs),
    }
    if endpoint:
        try:
            client_kwargs["endpoint_url"] = sts_endpoint_url(endpoint)
        except ValueError as e:
            raise CredentialProviderError(str(e)) from e
    return session.client("sts", **client_kwargs)


def _session_from_response(response: Mapping[str, Any]) -> boto3.Session:
    creds = response["Credentials"]
    return boto3.Session(
        aws_access_key_id=creds["AccessKeyId"],
        aws_secret_access_key=creds["SecretAccessKey"],
        aws_session_token=creds["SessionToken"],
    )


def _assume_role_session(descriptor: AssumeRoleCredentials) -> boto3.Session:
    source = build_session(descriptor.base)
    sts = _sts_client(
        source,
        region=descriptor.sts_region,
        endpoint=descriptor.sts_endpoint,
        proxy=descriptor.proxy,
    )

    request: dict[str, Any] = {
        "RoleArn": descriptor.role_arn,
        "RoleSessionName": descriptor.session_name,
        "DurationSeconds": descriptor.max_session_seconds,
    }
    if descriptor.external_id is not None:
        request["ExternalId"] = descriptor.external_id

    try:
        response = sts.assume_role(**request)
    except (ClientError, BotoCoreError) as e:
        raise CredentialProviderError(
            f"Failed to assume role {descriptor.role_arn}: {e}"
        ) from e
    return _session_from_response(response)


def _web_identity_session(descriptor: WebIdentityCredentials) -> boto3.Session:
    try:
        token = Path(descriptor.token_file).read_text(encoding="utf-8").strip()
    except OSError as e:
        raise CredentialProviderError(
            f"Could not read web identity token file {descriptor.token_file}: {e}"
        ) from e

    # AssumeRoleWithWebIdentity is an unsigned call; the token is the identity.
    sts = _sts_client(
        boto3.Session(),
        region=descriptor.sts_region,
        endpoint=descriptor.sts_endpoint,
        proxy=descriptor.proxy,
        unsigned=True,
    )
    try:
        response = sts.assume_role_with_web_identity(
            RoleArn=descriptor.role_arn,
            RoleSessionName=descriptor.session_name,
            WebIdentityToken=token,
            DurationSeconds=descriptor.max_session_seconds,
        )
    except (ClientError, BotoCoreError) as e:
        raise CredentialProviderError(
            f"Failed to assume role {descriptor.role_arn} with web identity: {e}"
        ) from e
    return _session_from_response(response)
