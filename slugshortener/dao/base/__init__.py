from slugshortener.dao.base.short_link_base_dao import ShortLinkBaseDAO
from slugshortener.dao.base.quota_base_dao import QuotaBaseDAO


__all__ = [
    'ShortLinkBaseDAO',
    'QuotaBaseDAO',
]
