"""Unit tests for the redirect_url AWS Lambda handler.

Test coverage includes:

1. Successful redirects
   - Live slugs redirect with HTTP 301 and a Cache-Control bounded by the link's lifetime.
   - Redirects never modify the registry.

2. Missing links
   - Unknown, expired and malformed slugs return HTTP 404.
   - A missing path parameter returns HTTP 400.

3. Configuration and data store errors
   - Configuration problems and Redis outages return HTTP 500.

4. Warm containers
   - Repeated redirects reuse the configuration loaded by the first one.
"""

import json
from io import BytesIO
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from slugshortener.lambdas.redirect_url import app
from slugshortener.utils import config as app_config
from slugshortener.models import ShortLinkModel
from slugshortener.dao.exceptions import DataStoreError
from slugshortener.exceptions import BadConfigurationError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture()
def apigw_event():
    def _event(slug):
        return {
            'resource': '/{url}',
            'httpMethod': 'GET',
            'path': f'/{slug}',
            'pathParameters': None if slug is None else {'url': slug},
            'headers': {'User-Agent': 'pytest'},
            'requestContext': {
                'resourcePath': '/{url}',
                'httpMethod': 'GET',
                'domainName': 'sho.rt',
                'stage': 'Prod',
                'identity': {'sourceIp': '203.0.113.7'},
            },
        }

    return _event


@pytest.fixture()
def context():
    class _Context:
        function_name = 'redirect_url'

    return _Context()


@pytest.fixture()
def config():
    return {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}, 'shortener': {}}


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, config, short_link_store):
    monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
    monkeypatch.setattr(app, 'ShortLinkRedisDAO', lambda *a, **kw: short_link_store)


# -------------------------------
# 1. Successful redirects
# -------------------------------


def test_lambda_handler_redirects(apigw_event, context, short_link_store):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        short_link_store.insert(ShortLinkModel(target='https://example.com/a', slug='promo', ttl=7200))
        frozen.tick(200)

        response = app.lambda_handler(apigw_event('promo'), context)

    assert response['statusCode'] == 301
    assert response['headers']['Location'] == 'https://example.com/a'
    assert response['headers']['Cache-Control'] == 'public, max-age=7000'
    assert response['body'] == ''


def test_lambda_handler_is_idempotent(apigw_event, context, short_link_store):
    short_link_store.insert(ShortLinkModel(target='https://example.com/a', slug='promo'))

    locations = [app.lambda_handler(apigw_event('promo'), context)['headers']['Location'] for _ in range(3)]

    assert locations == ['https://example.com/a'] * 3
    assert short_link_store.insert_calls == 1


# -------------------------------
# 2. Missing links
# -------------------------------


def test_lambda_handler_with_unknown_slug(apigw_event, context):
    response = app.lambda_handler(apigw_event('ghost'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 404
    assert body['message'] == "Not Found (short url https://sho.rt/ghost doesn't exist)"
    assert body['errorCode'] == 'dao:short_link_not_found_error'


def test_lambda_handler_with_expired_slug(apigw_event, context, short_link_store):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        short_link_store.insert(ShortLinkModel(target='https://example.com/a', slug='promo', ttl=3600))
        frozen.tick(3600)

        response = app.lambda_handler(apigw_event('promo'), context)

    assert response['statusCode'] == 404


@pytest.mark.parametrize('slug', ['pro-mo', 'abcdefghijk', '%2e%2e'])
def test_lambda_handler_with_malformed_slug(apigw_event, context, slug):
    response = app.lambda_handler(apigw_event(slug), context)
    assert response['statusCode'] == 404


@pytest.mark.parametrize('slug', [None, ''])
def test_lambda_handler_with_missing_slug(apigw_event, context, slug):
    response = app.lambda_handler(apigw_event(slug), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert body['message'] == "Bad Request (missing 'url' in path)"
    assert body['errorCode'] == 'MISSING_SLUG'


# -------------------------------
# 3. Configuration and data store errors
# -------------------------------


def test_lambda_handler_with_bad_configuration(monkeypatch, apigw_event, context):
    def _bad(*a, **kw):
        raise BadConfigurationError('Bad host http://evil.example.com:2772')

    monkeypatch.setattr(app, 'load_config', _bad)

    response = app.lambda_handler(apigw_event('promo'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body['message'] == 'Internal Server Error'
    assert body['errorCode'] == 'config:bad_configuration_error'


def test_lambda_handler_with_unreachable_redis(apigw_event, context, short_link_store, monkeypatch):
    def _unreachable(slug, **kwargs):
        raise DataStoreError('Redis at redis.test:6379/0 timed out.')

    monkeypatch.setattr(short_link_store, 'get', _unreachable)

    response = app.lambda_handler(apigw_event('promo'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body['errorCode'] == 'dao:data_store_error'


# -------------------------------
# 4. Warm containers
# -------------------------------


def test_repeated_redirects_load_appconfig_once(monkeypatch, apigw_event, context, config, short_link_store):
    document = {'build': 3, 'active_backend': 'redis', 'configs': {'redirect_url': config}}
    appconfig = MagicMock()
    appconfig.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    appconfig.get_latest_configuration.side_effect = lambda **kw: {'Configuration': BytesIO(json.dumps(document).encode('utf-8'))}

    monkeypatch.setattr(app, 'load_config', app_config.load_config)
    monkeypatch.setattr(app_config.boto3, 'client', lambda service: appconfig)
    monkeypatch.setenv('APP_ENV', 'prod')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('APPCONFIG_CACHE_MAX_AGE', raising=False)
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')

    short_link_store.insert(ShortLinkModel(target='https://example.com/a', slug='promo'))

    statuses = [app.lambda_handler(apigw_event('promo'), context)['statusCode'] for _ in range(3)]

    assert statuses == [301] * 3
    appconfig.start_configuration_session.assert_called_once()
    appconfig.get_latest_configuration.assert_called_once()
