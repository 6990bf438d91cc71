"""Custom exceptions used across RosterFlow."""


class RosterFlowError(Exception):
    """Base error for the application."""


class ConfigError(RosterFlowError):
    """Configuration related error."""


class TemplateLoadError(RosterFlowError):
    """Raised when the template workbook cannot be loaded."""


class RulesError(RosterFlowError):
    """Raised when the rules table cannot be read."""


class GenerationError(RosterFlowError):
    """Raised when roster generation fails part way through a run."""
