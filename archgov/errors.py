"""Exceptions raised around the governance core (never by the validator itself)."""


class GovernanceError(Exception):
    """Base class for archgov errors."""


class MalformedDiagram(GovernanceError, ValueError):
    """A diagram document could not be parsed or lacks a required field."""


class PolicyConfigError(GovernanceError):
    """A governance policy file is missing or invalid."""
