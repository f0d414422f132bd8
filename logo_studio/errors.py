class LogoStudioError(Exception):
    """Base class for errors raised by the logo pipeline."""


class ModelResponseError(LogoStudioError):
    """A single model response could not be turned into a usable result."""


class GenerationFailure(LogoStudioError):
    """A model request failed on every attempt."""

    def __init__(self, label: str, attempts: int, last_error: str):
        self.label = label
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed to {label} after {attempts} attempts: {last_error}")


class StoreError(LogoStudioError):
    """The store rejected a read or write."""


class ProjectNotFoundError(LogoStudioError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class MissingBrandAnalysisError(LogoStudioError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__("Project has no brand analysis. Analyze the transcript first.")
