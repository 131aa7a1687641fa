"""
Error Types

Exceptions raised by the gateways and the onboarding flow. Every failure is
terminal for the attempt that raised it; nothing in the package retries.
"""


class CareerPathError(Exception):
    """Base class for all careerpath errors."""

    pass


class ConfigurationError(CareerPathError):
    """Raised when the API credential or a bundled resource is missing or invalid."""

    pass


class ExtractionError(CareerPathError):
    """Raised when a CV could not be turned into a partial profile."""

    pass


class AnalysisError(CareerPathError):
    """Raised when the career analysis call fails or breaks its contract."""

    pass


class ChatTransportError(CareerPathError):
    """Raised by a chat session when a turn produced no usable reply."""

    pass
