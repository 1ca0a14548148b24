from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union

from .config import Strategy
from .errors import Violation

DEFAULT_MAX_SESSION_SECONDS = 3600
MIN_MAX_SESSION_SECONDS = 900
MAX_MAX_SESSION_SECONDS = 3600
DEFAULT_STS_REGION = "us-west-2"


@dataclass(frozen=True)
class DefaultCredentials:
    """Ambient credentials discovered by the SDK's default provider chain."""

    strategy: ClassVar[Strategy] = Strategy.DEFAULT


@dataclass(frozen=True)
class AnonymousCredentials:
    """Unsigned requests, for public resources."""

    strategy: ClassVar[Strategy] = Strategy.ANONYMOUS


@dataclass(frozen=True)
class StaticKeyPairCredentials:
    strategy: ClassVar[Strategy] = Strategy.STATIC_KEY_PAIR

    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class CredentialsFileCredentials:
    """Access key pair read from a properties file at ``path``."""

    strategy: ClassVar[Strategy] = Strategy.CREDENTIALS_FILE

    path: str


@dataclass(frozen=True)
class NamedProfileCredentials:
    strategy: ClassVar[Strategy] = Strategy.NAMED_PROFILE

    profile_name: str


BaseCredentials = Union[
    DefaultCredentials,
    AnonymousCredentials,
    StaticKeyPairCredentials,
    CredentialsFileCredentials,
    NamedProfileCredentials,
]


@dataclass(frozen=True)
class ProxySettings:
    """HTTP proxy used for STS calls only."""

    host: str
    port: int


@dataclass(frozen=True)
class AssumeRoleCredentials:
    """Temporary role credentials obtained with ``base`` as source identity.

    Attributes:
        role_arn: ARN of the role to assume.
        session_name: Role session name reported to STS.
        base: The base strategy supplying the source credentials.
        max_session_seconds: Requested session duration.
        external_id: Optional external ID required by the role's trust policy.
        sts_endpoint: Optional custom STS endpoint.
        sts_region: Region of the STS client.
        proxy: Optional proxy for STS calls.
    """

    strategy: ClassVar[Strategy] = Strategy.ASSUME_ROLE

    role_arn: str
    session_name: str
    base: BaseCredentials
    max_session_seconds: int = DEFAULT_MAX_SESSION_SECONDS
    external_id: str | None = None
    sts_endpoint: str | None = None
    sts_region: str = DEFAULT_STS_REGION
    proxy: ProxySettings | None = None


@dataclass(frozen=True)
class WebIdentityCredentials:
    """Temporary role credentials exchanged for a web identity token.

    No base credentials are involved; the token read from ``token_file`` is
    the only identity assertion.
    """

    strategy: ClassVar[Strategy] = Strategy.ASSUME_ROLE_WITH_WEB_IDENTITY

    role_arn: str
    session_name: str
    token_file: str
    max_session_seconds: int = DEFAULT_MAX_SESSION_SECONDS
    sts_endpoint: str | None = None
    sts_region: str = DEFAULT_STS_REGION
    proxy: ProxySettings | None = None


CredentialDescriptor = Union[
    BaseCredentials,
    AssumeRoleCredentials,
    WebIdentityCredentials,
]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a parameter set.

    Exactly one of ``descriptor`` and ``violations`` is meaningful: a valid
    result has a descriptor and no violations, an invalid one has at least
    one violation and no descriptor.
    """

    descriptor: CredentialDescriptor | None = None
    violations: tuple[Violation, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.violations

    @property
    def strategy(self) -> Strategy | None:
        return self.descriptor.strategy if self.descriptor is not None else None

    def diagnostics(self) -> list[str]:
        """One human-readable line per violation."""
        return [str(v) for v in self.violations]
