class PricingError(Exception):
    """Base exception for pricing and estimate errors."""


class JobNotFoundError(PricingError):
    """Raised when a job does not exist for the organization."""


class EstimateNotFoundError(PricingError):
    """Raised when an estimate does not exist for the organization."""


class InvalidEstimateStatusError(PricingError):
    """Raised for a status outside draft/sent/accepted/declined."""


class InvalidEstimateTypeError(PricingError):
    """Raised for an estimate type outside consumer/contractor/material_only."""
