# Log event names for the shorten_url Lambda
CONFIG_UNAVAILABLE = 'CONFIG_UNAVAILABLE'
MALFORMED_REQUEST = 'MALFORMED_REQUEST'
INVALID_INPUT = 'INVALID_INPUT'
RATE_LIMITED = 'RATE_LIMITED'
SLUG_CONFLICT = 'SLUG_CONFLICT'
GENERATION_EXHAUSTED = 'GENERATION_EXHAUSTED'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
