"""Application-specific exceptions.

Every exception carries a stable `error_code` which Lambda handlers echo back
to clients in the `errorCode` field of error responses.

Classes:
    SlugShortenerError:
        Base class for all application errors.

    RequestError:
        Base class for malformed client input (never retried).

    RateLimitedError:
        Raised when a caller exhausted their link generation quota.

    SlugConflictError:
        Raised when a caller-supplied slug is already taken.

    GenerationExhaustedError:
        Raised when every generated slug candidate collided.

    ConfigurationError:
        Base class for configuration problems.
"""


class SlugShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:slugshortener_error'


class RequestError(SlugShortenerError):
    """Base exception for invalid client input."""

    error_code = 'request:request_error'


class MalformedRequestError(RequestError):
    """Raised when a request body can't be parsed or misses required fields."""

    error_code = 'request:malformed_request_error'


class InvalidURLError(RequestError):
    """Raised when a target URL is not an absolute HTTPS URL."""

    error_code = 'request:invalid_url_error'

    def __init__(self, url: str, reason: str = 'not an absolute https URL'):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL '{url}': {reason}.")


class InvalidSlugError(RequestError):
    """Raised when a custom slug uses symbols outside [a-zA-Z0-9] or is too long."""

    error_code = 'request:invalid_slug_error'

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Invalid custom short '{slug}': use 1-10 letters or digits.")


class InvalidExpiryError(RequestError):
    """Raised when the requested expiry is not a non-negative whole number of hours."""

    error_code = 'request:invalid_expiry_error'

    def __init__(self, expiry: object):
        self.expiry = expiry
        super().__init__(f"Invalid expiry '{expiry}': must be a non-negative number of hours.")


class RateLimitedError(SlugShortenerError):
    """Raised when a caller has no link generation quota left in the current window."""

    error_code = 'quota:rate_limited_error'

    def __init__(self, caller: str, retry_after: int):
        self.caller = caller
        self.retry_after = retry_after
        super().__init__(f'Rate limit exceeded. Try again in {retry_after} seconds.')


class SlugConflictError(SlugShortenerError):
    """Raised when a custom slug is already registered."""

    error_code = 'registry:slug_conflict_error'

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Custom short '{slug}' is already in use.")


class GenerationExhaustedError(SlugShortenerError):
    """Raised when the bounded number of generated slug candidates all collided.

    Frequent occurrences mean the identifier space is too small for the
    number of live links and `id_space` should be raised.
    """

    error_code = 'registry:generation_exhausted_error'

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f'Could not find a free short after {attempts} attempts.')


class ConfigurationError(SlugShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError, ValueError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
