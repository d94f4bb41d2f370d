import json
import logging

from botocore.exceptions import BotoCoreError, ClientError

from slugshortener.exceptions import ConfigurationError
from slugshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from slugshortener.dao.redis import ShortLinkRedisDAO
from slugshortener.dao.exceptions import DataStoreError, ShortLinkNotFoundError
from slugshortener.services import ResolutionService
from slugshortener.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from slugshortener.lambdas.redirect_url.constants import (
    CONFIG_UNAVAILABLE,
    MISSING_SLUG,
    SHORT_LINK_NOT_FOUND,
    DATA_STORE_UNAVAILABLE,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_error(status_code: int, message: str, error_code: str) -> dict:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'message': message, 'errorCode': error_code}),
    }


def response_301(*, location: str, max_age: int) -> dict:
    return {
        'statusCode': 301,
        'headers': {
            'Location': location,
            # Browsers may cache the redirect, but never past the link's expiry
            'Cache-Control': f'public, max-age={max_age}',
        },
        'body': '',
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract the slug from the request path (`/{url}`)
    - Step 2: Look up the short link (a single read, no side effects)
    - Step 3: Redirect client to target URL

    HTTP responses:
        301: Successful redirect
            headers:
                Location: target URL destination
        400: Missing slug in path parameters
        404: Short link never existed or expired
        500: Internal server error

    Args:
        event (dict):
            API Gateway event payload containing the `url` path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'url': 'promo'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://example.com/a'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    except (ConfigurationError, BotoCoreError, ClientError, KeyError) as e:
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.', extra={'event': CONFIG_UNAVAILABLE})
        return response_error(500, 'Internal Server Error', getattr(e, 'error_code', ConfigurationError.error_code))

    # 1- Extract slug from request's path
    slug = (event.get('pathParameters') or {}).get('url')
    if not slug:
        logger.info('Missing "url" in path. Responding with 400.', extra={'event': MISSING_SLUG})
        return response_error(400, "Bad Request (missing 'url' in path)", MISSING_SLUG)

    # 2- Look up the short link
    try:
        # Skip the PING: the lookup itself surfaces connectivity errors
        short_link_dao = ShortLinkRedisDAO(**redis_config, prefix=app_prefix(), healthcheck=False)
        link = ResolutionService(short_link_dao).resolve(slug)
    except ShortLinkNotFoundError as e:
        logger.info('Short link not found. Responding with 404.', extra={'slug': slug, 'event': SHORT_LINK_NOT_FOUND})
        return response_error(404, f"Not Found (short url {get_short_url(slug, event)} doesn't exist)", e.error_code)
    except DataStoreError as e:
        logger.exception('Data store unavailable. Responding with 500.', extra={'slug': slug, 'event': DATA_STORE_UNAVAILABLE})
        return response_error(500, 'Internal Server Error', e.error_code)

    # 3- Redirect client to target URL
    logger.info('Redirecting client to target URL. Responding with 301.', extra={'slug': slug, 'event': REDIRECT_SUCCESS})
    return response_301(location=link.target, max_age=link.ttl)
