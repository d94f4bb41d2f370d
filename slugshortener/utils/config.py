"""Utility functions for application configuration management.

Lambda functions read their configuration from **AWS AppConfig**. Each
environment (`APP_ENV`) has a dedicated AppConfig *Environment* within the
shared AppConfig *Application* identified by `APP_NAME`. The configuration
JSON document follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { "host": "...", "port": 6379, "db": 0 },
                "shortener": {
                    "quota": 10,
                    "quota_window": 1800,
                    "default_expiry_hours": 24,
                    "id_space": 3521614606208,
                    "max_generation_attempts": 5,
                    "quota_fail_open": true,
                    "domain": "sho.rt"
                }
            },
            "redirect_url": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this document.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return the key prefix for DAOs, or None if `APP_NAME` is not set.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig (or from a
        local AppConfig agent when running under SAM).
        Sections pulled from AWS AppConfig are reused by a warm container for
        `APPCONFIG_CACHE_MAX_AGE` seconds.

    clear_appconfig_cache() -> None
        Drop every cached configuration section.

Classes:
    ShortenerSettings
        Validated link generation settings with defaults for every value.

Example:
    Typical usage inside a Lambda handler:

        >>> from slugshortener.utils.config import load_config, ShortenerSettings
        >>> config = load_config('shorten_url')
        >>> settings = ShortenerSettings.from_config(config['shortener'])
        >>> settings.quota
        10
"""

import os
import copy
import json
import time
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass, fields
from typing import Any, Optional
from collections.abc import Callable

import boto3

from slugshortener.exceptions import BadConfigurationError
from slugshortener.types import AppConfig, AppConfigDataClient, LambdaConfiguration
from slugshortener.utils.helpers import require_environment
from slugshortener.utils.runtime import running_locally
from slugshortener.utils.shortener import MAX_ID_SPACE
from slugshortener.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    APPCONFIG_AGENT_URL_ENV,
    APPCONFIG_PROFILE_NAME_ENV,
    APPCONFIG_CACHE_MAX_AGE_ENV,
    DEFAULT_APPCONFIG_CACHE_MAX_AGE_SECONDS,
    DEFAULT_EXPIRY_HOURS,
    DEFAULT_ID_SPACE,
    DEFAULT_LINK_GENERATION_QUOTA,
    DEFAULT_QUOTA_WINDOW_SECONDS,
    MAX_GENERATION_ATTEMPTS,
)


logger = logging.getLogger(__name__)

SHORTENER_SECTION = 'shortener'


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'slugshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'slugshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _lambda_section(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Pick the active backend and shortener settings for one Lambda"""
    backend = document['active_backend']
    lambda_config = document['configs'][lambda_name]
    return {
        backend: lambda_config[backend],
        SHORTENER_SECTION: lambda_config.get(SHORTENER_SECTION, {}),
    }


def _validate_agent_url(url: str | None) -> str:
    if not url:
        return ''
    components = urllib.parse.urlparse(url)
    if components.scheme not in {'http', 'https'}:
        raise BadConfigurationError(f'Bad scheme {url}')
    if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
        raise BadConfigurationError(f'Bad host {url}')
    if components.port not in {2772, None}:
        raise BadConfigurationError(f'Bad port {url}')
    return url


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a local URL, fetch the configuration JSON from the local agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        agent_url = _validate_agent_url(os.getenv(APPCONFIG_AGENT_URL_ENV))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(APPCONFIG_PROFILE_NAME_ENV, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return _lambda_section(document, lambda_name)

    return wrapper


_appconfig_cache: dict[str, tuple[float, LambdaConfiguration]] = {}


def _cache_max_age() -> float:
    raw = os.getenv(APPCONFIG_CACHE_MAX_AGE_ENV)
    if raw is None or raw == '':
        return float(DEFAULT_APPCONFIG_CACHE_MAX_AGE_SECONDS)
    try:
        max_age = float(raw)
    except ValueError as e:
        raise BadConfigurationError(f"'{APPCONFIG_CACHE_MAX_AGE_ENV}' must be a number of seconds, got {raw!r}.") from e
    if max_age < 0:
        raise BadConfigurationError(f"'{APPCONFIG_CACHE_MAX_AGE_ENV}' must not be negative, got {raw!r}.")
    return max_age


def clear_appconfig_cache() -> None:
    """Forget every configuration section held by this container"""
    _appconfig_cache.clear()


def cache_appconfig(func: Callable[[str], LambdaConfiguration]) -> Callable[[str], LambdaConfiguration]:
    """Decorator: reuse a loaded AppConfig section across warm Lambda invocations

    Behavior:
        - Sections are memoized per Lambda name in process memory, so a warm
          container pays the AppConfig round trips once per max age.
        - Once a section is older than `APPCONFIG_CACHE_MAX_AGE` seconds
          (default: 60) it is pulled again through the wrapped function.
        - A max age of 0 disables caching.
        - Failed loads are never cached; the exception propagates to the caller.

    Environment variables used:
        APPCONFIG_CACHE_MAX_AGE – Seconds a section stays fresh.
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> LambdaConfiguration:
        max_age = _cache_max_age()
        now = time.monotonic()

        cached = _appconfig_cache.get(lambda_name)
        if cached is not None and max_age > 0 and now - cached[0] < max_age:
            logger.debug('Using cached AppConfig.', extra={'lambdaName': lambda_name, 'age': round(now - cached[0], 3)})
            return copy.deepcopy(cached[1])

        section = func(lambda_name, *args, **kwargs)
        if max_age > 0:
            _appconfig_cache[lambda_name] = (now, copy.deepcopy(section))
        return section

    return wrapper


@_sam_load_local_appconfig
@cache_appconfig
@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: The active backend section and the `shortener` settings section.

    Raises:
        MissingEnvironmentVariableError:
            If any AppConfig identifier is missing.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return _lambda_section(document, lambda_name)


@dataclass(frozen=True)
class ShortenerSettings:
    """Link generation settings consumed by the registration service

    Attributes:
        quota (int):
            Link generation attempts granted per caller and window.
        quota_window (int):
            Quota window length in seconds.
        default_expiry_hours (int):
            TTL applied when a request omits the expiry or sends 0.
        id_space (int):
            Exclusive upper bound of randomly drawn identifiers.
        max_generation_attempts (int):
            Cap on collision retries for generated slugs.
        quota_fail_open (bool):
            Admit requests when the quota store is unreachable.
            Strict deployments may set this to False to fail closed.
        domain (Optional[str]):
            Public host of this service; links pointing back at it are refused.
    """

    quota: int = DEFAULT_LINK_GENERATION_QUOTA
    quota_window: int = DEFAULT_QUOTA_WINDOW_SECONDS
    default_expiry_hours: int = DEFAULT_EXPIRY_HOURS
    id_space: int = DEFAULT_ID_SPACE
    max_generation_attempts: int = MAX_GENERATION_ATTEMPTS
    quota_fail_open: bool = True
    domain: Optional[str] = None

    def __post_init__(self):
        for name in ('quota', 'quota_window', 'default_expiry_hours', 'max_generation_attempts'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise BadConfigurationError(f"Setting '{name}' must be a positive integer (given value: {value!r}).")
        if not isinstance(self.id_space, int) or not 0 < self.id_space <= MAX_ID_SPACE:
            raise BadConfigurationError(f"Setting 'id_space' must be in (0, {MAX_ID_SPACE}] (given value: {self.id_space!r}).")
        if not isinstance(self.quota_fail_open, bool):
            raise BadConfigurationError(f"Setting 'quota_fail_open' must be a boolean (given value: {self.quota_fail_open!r}).")

    @classmethod
    def from_config(cls, section: dict[str, Any] | None) -> 'ShortenerSettings':
        """Build settings from a `shortener` config section, ignoring unknown keys"""
        known = {field.name for field in fields(cls)}
        values = {key: value for key, value in (section or {}).items() if key in known}
        return cls(**values)
