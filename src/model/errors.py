"""Errors raised by the tax and projection calculators."""


class EngineError(ValueError):
    """Base class for every error the engine raises."""


class CalculationError(EngineError):
    """Input lies outside the domain a formula is defined on."""


class ConfigurationError(EngineError):
    """Reference data is missing, malformed, or has no entry for a requested year."""
