"""Custom exception hierarchy for premium-engine."""


class PremiumEngineError(Exception):
    """Base exception for all premium-engine errors."""


class EntityNotFoundError(PremiumEngineError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class ConfigurationError(PremiumEngineError):
    """Raised when configuration is invalid or missing."""


class ValidationError(PremiumEngineError):
    """Raised when an input value is rejected before computation."""
