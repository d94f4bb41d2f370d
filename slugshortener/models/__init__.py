from slugshortener.models.short_link_model import ShortLinkModel
from slugshortener.models.quota_model import QuotaModel


__all__ = [
    'ShortLinkModel',
    'QuotaModel',
]
