"""Select and validate the AWS credential strategy for a parameter set.

:func:`validate` and :func:`resolve` run the same evaluation: coerce the raw
strings, then check conflicting base strategies, incomplete pairs, malformed
values, ranges and dependent fields, collecting every violation before
selecting a strategy. Neither function keeps state between calls.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Mapping

from pydantic import StringConstraints, TypeAdapter, ValidationError

from .config import KEYS, AuthParameters, Strategy
from .errors import ConfigurationError, Violation, ViolationKind
from .models import (
    DEFAULT_MAX_SESSION_SECONDS,
    DEFAULT_STS_REGION,
    MAX_MAX_SESSION_SECONDS,
    MIN_MAX_SESSION_SECONDS,
    AnonymousCredentials,
    AssumeRoleCredentials,
    BaseCredentials,
    CredentialDescriptor,
    CredentialsFileCredentials,
    DefaultCredentials,
    NamedProfileCredentials,
    ProxySettings,
    StaticKeyPairCredentials,
    ValidationResult,
    WebIdentityCredentials,
)

logger = logging.getLogger(__name__)

# Flags take "true" or "false" in any case; integers are plain decimal digits.
_BOOL = TypeAdapter(Literal["true", "false"])
_INT = TypeAdapter(Annotated[str, StringConstraints(pattern=r"^[+-]?[0-9]+$")])

BOOLEAN_FIELDS = ("use_default_credentials", "use_anonymous_credentials")
INTEGER_FIELDS = ("assume_role_max_session_seconds", "assume_role_proxy_port")

# Fields whose presence indicates each base strategy. The two flag fields
# only count when they coerce to True.
BASE_STRATEGY_FIELDS: dict[Strategy, tuple[str, ...]] = {
    Strategy.DEFAULT: ("use_default_credentials",),
    Strategy.ANONYMOUS: ("use_anonymous_credentials",),
    Strategy.STATIC_KEY_PAIR: ("access_key", "secret_key"),
    Strategy.CREDENTIALS_FILE: ("credentials_file",),
    Strategy.NAMED_PROFILE: ("profile_name",),
}

PAIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("access_key", "secret_key"),
    ("assume_role_arn", "assume_role_session_name"),
    ("assume_role_proxy_host", "assume_role_proxy_port"),
)

ASSUME_ROLE_DEPENDENT_FIELDS = (
    "assume_role_external_id",
    "assume_role_sts_endpoint",
    "assume_role_sts_region",
    "assume_role_max_session_seconds",
    "web_identity_token_file",
)
PROXY_FIELDS = ("assume_role_proxy_host", "assume_role_proxy_port")

MAX_PORT = 65535

Values = dict[str, Any]


def validate(params: AuthParameters | Mapping[str, Any]) -> ValidationResult:
    """Validate ``params`` and report every violation found.

    Args:
        params: The parameter set, or a plain mapping of keys to strings.

    Returns:
        A :class:`ValidationResult`. When valid it carries the selected
        descriptor; otherwise the complete list of violations.
    """
    return _evaluate(_as_parameters(params))


def resolve(params: AuthParameters | Mapping[str, Any]) -> CredentialDescriptor:
    """Return the single credential descriptor selected by ``params``.

    Args:
        params: The parameter set, or a plain mapping of keys to strings.

    Returns:
        The typed descriptor of the selected strategy.

    Raises:
        ConfigurationError: If validation fails. It carries the same
            violations :func:`validate` reports.
    """
    result = _evaluate(_as_parameters(params))
    if result.descriptor is None:
        raise ConfigurationError(result.violations)
    return result.descriptor


def _as_parameters(params: AuthParameters | Mapping[str, Any]) -> AuthParameters:
    if isinstance(params, AuthParameters):
        return params
    return AuthParameters.from_mapping(params)


def _evaluate(params: AuthParameters) -> ValidationResult:
    values, malformed = _coerce(params)
    violations = [
        *_check_conflicts(params, values),
        *_check_pairs(params),
        *malformed,
        *_check_ranges(params, values),
        *_check_dependencies(params),
    ]
    if violations:
        logger.info(
            "AWS credential configuration rejected with %d violation(s)",
            len(violations),
        )
        return ValidationResult(violations=tuple(violations))

    descriptor = _select(params, values)
    logger.debug("Selected AWS credential strategy: %s", descriptor.strategy.value)
    return ValidationResult(descriptor=descriptor)


def _coerce(params: AuthParameters) -> tuple[Values, list[Violation]]:
    """Parse typed fields; unparseable values are left out of the result."""
    values: Values = {}
    violations: list[Violation] = []

    for name in BOOLEAN_FIELDS:
        raw = getattr(params, name)
        if raw is None:
            continue
        try:
            values[name] = _BOOL.validate_python(raw.lower()) == "true"
        except ValidationError:
            violations.append(
                Violation(
                    ViolationKind.MALFORMED_VALUE,
                    (name,),
                    f"expected 'true' or 'false', got {raw!r}",
                )
            )

    for name in INTEGER_FIELDS:
        raw = getattr(params, name)
        if raw is None:
            continue
        try:
            values[name] = int(_INT.validate_python(raw))
        except ValidationError:
            violations.append(
                Violation(
                    ViolationKind.MALFORMED_VALUE,
                    (name,),
                    f"expected a whole number, got {raw!r}",
                )
            )

    return values, violations


def _indicated_base_strategies(
    params: AuthParameters, values: Values
) -> dict[Strategy, tuple[str, ...]]:
    """Map each indicated base strategy to the fields indicating it."""
    indicated: dict[Strategy, tuple[str, ...]] = {}
    for strategy, names in BASE_STRATEGY_FIELDS.items():
        if names[0] in BOOLEAN_FIELDS:
            present = tuple(n for n in names if values.get(n) is True)
        else:
            present = tuple(n for n in names if params.is_set(n))
        if present:
            indicated[strategy] = present
    return indicated


def _check_conflicts(params: AuthParameters, values: Values) -> list[Violation]:
    violations = []
    indicated = _indicated_base_strategies(params, values)
    if len(indicated) > 1:
        fields = tuple(n for names in indicated.values() for n in names)
        strategies = ", ".join(s.value for s in indicated)
        violations.append(
            Violation(
                ViolationKind.CONFLICTING_STRATEGY,
                fields,
                f"mutually exclusive credential strategies configured: {strategies}",
            )
        )

    # Unsigned requests cannot call sts:AssumeRole; web identity needs no base.
    if (
        values.get("use_anonymous_credentials") is True
        and _assume_role_active(params)
        and not params.is_set("web_identity_token_file")
    ):
        violations.append(
            Violation(
                ViolationKind.CONFLICTING_STRATEGY,
                (
                    "use_anonymous_credentials",
                    "assume_role_arn",
                    "assume_role_session_name",
                ),
                "anonymous credentials cannot be used to assume a role",
            )
        )
    return violations


def _check_pairs(params: AuthParameters) -> list[Violation]:
    violations = []
    for first, second in PAIRED_FIELDS:
        if params.is_set(first) == params.is_set(second):
            continue
        present, missing = (first, second) if params.is_set(first) else (second, first)
        violations.append(
            Violation(
                ViolationKind.INCOMPLETE_PAIR,
                (first, second),
                f"{KEYS[present]} is set but {KEYS[missing]} is missing",
            )
        )
    return violations


def _check_ranges(params: AuthParameters, values: Values) -> list[Violation]:
    violations = []

    seconds = values.get("assume_role_max_session_seconds")
    if (
        seconds is not None
        and _assume_role_active(params)
        and not MIN_MAX_SESSION_SECONDS <= seconds <= MAX_MAX_SESSION_SECONDS
    ):
        violations.append(
            Violation(
                ViolationKind.OUT_OF_RANGE,
                ("assume_role_max_session_seconds",),
                f"must be between {MIN_MAX_SESSION_SECONDS} and "
                f"{MAX_MAX_SESSION_SECONDS} seconds, got {seconds}",
            )
        )

    port = values.get("assume_role_proxy_port")
    if port is not None and not 0 < port <= MAX_PORT:
        violations.append(
            Violation(
                ViolationKind.OUT_OF_RANGE,
                ("assume_role_proxy_port",),
                f"must be between 1 and {MAX_PORT}, got {port}",
            )
        )

    return violations


def _check_dependencies(params: AuthParameters) -> list[Violation]:
    if _assume_role_active(params):
        return []

    activation = f"{KEYS['assume_role_arn']} and {KEYS['assume_role_session_name']}"
    violations = [
        Violation(
            ViolationKind.DANGLING_DEPENDENCY,
            (name,),
            f"only applies when {activation} are both set",
        )
        for name in ASSUME_ROLE_DEPENDENT_FIELDS
        if params.is_set(name)
    ]

    proxy = tuple(n for n in PROXY_FIELDS if params.is_set(n))
    if proxy:
        violations.append(
            Violation(
                ViolationKind.DANGLING_DEPENDENCY,
                proxy,
                f"proxy settings apply only to STS calls and require {activation}",
            )
        )
    return violations


def _assume_role_active(params: AuthParameters) -> bool:
    return params.is_set("assume_role_arn") and params.is_set(
        "assume_role_session_name"
    )


def _select_base(params: AuthParameters, values: Values) -> BaseCredentials:
    if values.get("use_anonymous_credentials") is True:
        return AnonymousCredentials()
    if params.access_key is not None:
        return StaticKeyPairCredentials(
            access_key=params.access_key,
            secret_key=params.secret_key_value() or "",
        )
    if params.credentials_file is not None:
        return CredentialsFileCredentials(path=params.credentials_file)
    if params.profile_name is not None:
        return NamedProfileCredentials(profile_name=params.profile_name)
    return DefaultCredentials()


def _select(params: AuthParameters, values: Values) -> CredentialDescriptor:
    """Build the descriptor for an already validated parameter set."""
    role_arn = params.assume_role_arn
    session_name = params.assume_role_session_name
    if role_arn is None or session_name is None:
        return _select_base(params, values)

    proxy = None
    if params.assume_role_proxy_host is not None:
        proxy = ProxySettings(
            host=params.assume_role_proxy_host,
            port=values["assume_role_proxy_port"],
        )
    max_session_seconds = values.get(
        "assume_role_max_session_seconds", DEFAULT_MAX_SESSION_SECONDS
    )
    sts_region = params.assume_role_sts_region or DEFAULT_STS_REGION

    if params.web_identity_token_file is not None:
        ignored = _indicated_base_strategies(params, values)
        if ignored:
            logger.debug(
                "Web identity selected; ignoring base strategy fields: %s",
                ", ".join(KEYS[n] for names in ignored.values() for n in names),
            )
        if params.assume_role_external_id is not None:
            logger.debug(
                "%s is not used by web identity role assumption",
                KEYS["assume_role_external_id"],
            )
        return WebIdentityCredentials(
            role_arn=role_arn,
            session_name=session_name,
            token_file=params.web_identity_token_file,
            max_session_seconds=max_session_seconds,
            sts_endpoint=params.assume_role_sts_endpoint,
            sts_region=sts_region,
            proxy=proxy,
        )

    return AssumeRoleCredentials(
        role_arn=role_arn,
        session_name=session_name,
        base=_select_base(params, values),
        max_session_seconds=max_session_seconds,
        external_id=params.assume_role_external_id,
        sts_endpoint=params.assume_role_sts_endpoint,
        sts_region=sts_region,
        proxy=proxy,
    )
