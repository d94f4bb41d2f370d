from slugshortener.services.quota_tracker import QuotaTracker
from slugshortener.services.registration import RegistrationService, RegistrationResult, validate_target_url
from slugshortener.services.resolution import ResolutionService


__all__ = [
    'QuotaTracker',
    'RegistrationService',
    'RegistrationResult',
    'ResolutionService',
    'validate_target_url',
]
