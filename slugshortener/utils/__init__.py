from slugshortener.utils.config import app_env, app_name, app_prefix, load_config, clear_appconfig_cache, ShortenerSettings
from slugshortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from slugshortener.utils.shortener import encode, is_valid_slug, generate_slug
from slugshortener.utils.runtime import running_locally, get_caller_key
from slugshortener.utils.logging import initialize_logging


__all__ = [
    'encode',
    'is_valid_slug',
    'generate_slug',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'clear_appconfig_cache',
    'ShortenerSettings',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'running_locally',
    'get_caller_key',
    'initialize_logging',
]
