import json
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from slugshortener.exceptions import (
    ConfigurationError,
    GenerationExhaustedError,
    MalformedRequestError,
    RateLimitedError,
    RequestError,
    SlugConflictError,
)
from slugshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from slugshortener.dao.redis import ShortLinkRedisDAO, QuotaRedisDAO
from slugshortener.dao.exceptions import DataStoreError
from slugshortener.services import QuotaTracker, RegistrationService
from slugshortener.utils import load_config, get_short_url, app_prefix, get_caller_key, guarantee_500_response, ShortenerSettings
from slugshortener.lambdas.shorten_url.constants import (
    CONFIG_UNAVAILABLE,
    MALFORMED_REQUEST,
    INVALID_INPUT,
    RATE_LIMITED,
    SLUG_CONFLICT,
    GENERATION_EXHAUSTED,
    DATA_STORE_UNAVAILABLE,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)

JSON_HEADERS = {'Content-Type': 'application/json'}


def response_json(status_code: int, body: dict, headers: dict | None = None) -> dict:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(status_code: int, message: str, error_code: str, **fields: Any) -> dict:
    return response_json(status_code, {'message': message, 'errorCode': error_code, **fields})


def response_500(error_code: str) -> dict:
    return response_error(500, 'Internal Server Error', error_code)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Load configuration
    - Step 2: Extract `url`, `short` and `expiry` from the request body
    - Step 3: Register the link (validation, caller quota, slug, conditional write)
    - Step 4: Respond with the new short link and the caller's quota state

    HTTP responses:
        200: Successful URL shortening
            url: original url
            short: slug
            short_url: full short url
            expiry: lifetime in hours
            rate_limit: attempts left in the caller's window
            rate_limit_reset: seconds until the caller's quota resets
        400: Bad client request (invalid JSON, bad URL, bad custom short, bad expiry)
        403: Custom short already in use
        503: Rate limit exceeded (rate_limit_reset + Retry-After) or no free short found
        500: Internal server error (configuration or data store failure)

    Args:
        event (Dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        Dict[str, Any]:
            API Gateway Lambda Proxy response.

    Example:
        >>> event = {'body': '{"url": "https://example.com/a"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['expiry']
        24
    """
    # 1- Load configuration
    try:
        app_config = load_config('shorten_url')
        settings = ShortenerSettings.from_config(app_config.get('shortener'))
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    except (ConfigurationError, BotoCoreError, ClientError, KeyError) as e:
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.', extra={'event': CONFIG_UNAVAILABLE})
        return response_500(getattr(e, 'error_code', ConfigurationError.error_code))

    # 2- Extract request fields
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': MALFORMED_REQUEST})
        return response_error(400, 'Bad Request (invalid JSON body)', MalformedRequestError.error_code)
    if not isinstance(request_body, dict) or not request_body.get('url'):
        logger.info("Missing 'url' in request body. Responding with 400.", extra={'event': MALFORMED_REQUEST})
        return response_error(400, "Bad Request (missing 'url' in JSON body)", MalformedRequestError.error_code)

    target_url = request_body['url']
    custom_slug = request_body.get('short') or None
    expiry_hours = request_body.get('expiry')
    caller = get_caller_key(event)

    # 3- Register the link
    try:
        short_link_dao = ShortLinkRedisDAO(**redis_config, prefix=app_prefix())
        quota_dao = QuotaRedisDAO(redis_client=short_link_dao.redis, prefix=app_prefix(), healthcheck=False)
        quota_tracker = QuotaTracker(
            quota_dao,
            quota=settings.quota,
            window=settings.quota_window,
            fail_open=settings.quota_fail_open,
        )
        service = RegistrationService(links=short_link_dao, quota_tracker=quota_tracker, settings=settings)
        result = service.register(target_url, caller=caller, custom_slug=custom_slug, expiry_hours=expiry_hours)
    except RequestError as e:
        logger.info('Invalid input. Responding with 400.', extra={'caller': caller, 'event': INVALID_INPUT, 'reason': str(e)})
        return response_error(400, f'Bad Request ({e})', e.error_code)
    except RateLimitedError as e:
        logger.info('Rate limit exceeded. Responding with 503.', extra={'caller': caller, 'event': RATE_LIMITED})
        return response_json(
            503,
            {'message': str(e), 'errorCode': e.error_code, 'rate_limit': 0, 'rate_limit_reset': e.retry_after},
            headers={'Retry-After': str(e.retry_after)},
        )
    except SlugConflictError as e:
        logger.info('Custom short already in use. Responding with 403.', extra={'slug': e.slug, 'event': SLUG_CONFLICT})
        return response_error(403, str(e), e.error_code)
    except GenerationExhaustedError as e:
        logger.error('No free short found. Responding with 503.', extra={'attempts': e.attempts, 'event': GENERATION_EXHAUSTED})
        return response_error(503, 'Service Unavailable (could not allocate a short, try again)', e.error_code)
    except DataStoreError as e:
        logger.exception('Data store unavailable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(e.error_code)

    # 4- Respond with the new short link
    link = result.link
    short_url = get_short_url(link.slug, event)
    logger.info('Shortened URL. Responding with 200.', extra={'slug': link.slug, 'event': SHORTEN_SUCCESS})
    return response_json(
        200,
        {
            'url': link.target,
            'short': link.slug,
            'short_url': short_url,
            'expiry': link.expiry_hours,
            'rate_limit': result.rate_limit,
            'rate_limit_reset': result.rate_limit_reset,
        },
    )
