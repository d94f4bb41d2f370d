# Default short link TTL (data retention period)
ONE_HOUR_SECONDS = 3_600  # 60 * 60
DEFAULT_EXPIRY_HOURS = 24

# Default link generation quota per caller and its window
DEFAULT_LINK_GENERATION_QUOTA = 10
DEFAULT_QUOTA_WINDOW_SECONDS = 1_800  # 60 * 30

# Slug alphabet bounds
MAX_SLUG_LENGTH = 10
DEFAULT_ID_SPACE = 62**7
MAX_GENERATION_ATTEMPTS = 5

# Longest target URL accepted for shortening
MAX_TARGET_URL_LENGTH = 2_048

# Application environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig: identifiers for the deployed configuration document
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Longest lifetime a caller may request for a short link (one year)
MAX_EXPIRY_HOURS = 8_760  # 24 * 365

# AppConfig: seconds a loaded configuration is reused by a warm Lambda container
APPCONFIG_CACHE_MAX_AGE_ENV = 'APPCONFIG_CACHE_MAX_AGE'
DEFAULT_APPCONFIG_CACHE_MAX_AGE_SECONDS = 60
