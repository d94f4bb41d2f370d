# Log event names for the redirect_url Lambda
CONFIG_UNAVAILABLE = 'CONFIG_UNAVAILABLE'
MISSING_SLUG = 'MISSING_SLUG'
SHORT_LINK_NOT_FOUND = 'SHORT_LINK_NOT_FOUND'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
