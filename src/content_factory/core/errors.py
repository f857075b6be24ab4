"""Custom exception hierarchy for ContentFactory."""


class ContentFactoryError(Exception):
    """Base exception for all ContentFactory errors."""


class AgentNotFoundError(ContentFactoryError):
    """No agent is registered under the requested id."""


class AgentPreconditionError(ContentFactoryError):
    """An agent declined to run in the current context."""


class PipelineError(ContentFactoryError):
    """Error in pipeline definition, loading, or result handling."""


class SettingsError(ContentFactoryError):
    """Error loading or validating the settings file."""


class GenerationError(ContentFactoryError):
    """The LLM response could not be turned into content drafts."""
