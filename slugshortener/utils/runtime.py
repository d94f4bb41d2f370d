"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if lambda is running in local SAM, False otherwise.
    get_caller_key(event) -> str:
        Identity used to track link generation quotas for a request.

Example:
    >>> from slugshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
"""

import os
from typing import Any

from slugshortener.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV


UNKNOWN_CALLER = 'unknown'


def running_locally() -> bool:
    """Check if the lambda is running locally via sam local invoke

    Returns:
        bool: True if running locally, False otherwise.
    """
    env = os.getenv(APP_ENV_ENV, '').lower()
    return env == 'local' or os.getenv(AWS_SAM_LOCAL_ENV) == 'true'


def get_caller_key(event: dict[str, Any]) -> str:
    """Return the caller's source IP from an API Gateway event

    Supports both REST (v1, `identity.sourceIp`) and HTTP (v2, `http.sourceIp`)
    payload formats. Callers without a resolvable address share one quota bucket.
    """
    request_context = event.get('requestContext') or {}
    source_ip = (request_context.get('identity') or {}).get('sourceIp') or (request_context.get('http') or {}).get('sourceIp')
    return source_ip or UNKNOWN_CALLER
