"""
Structural pipeline failures.

Field-level problems never raise; these exceptions mean the run cannot
continue and name the collaborator that failed.
"""


class PipelineError(Exception):
    """Fatal pipeline failure attributed to a component."""

    component = "pipeline"

    def __init__(self, message: str, component: str | None = None):
        if component is not None:
            self.component = component
        self.message = message
        super().__init__(f"[{self.component}] {message}")


class SourceReadError(PipelineError):
    """The input could not be read."""

    component = "reader"


class SourceSchemaError(SourceReadError):
    """The input is missing one or more required columns."""

    def __init__(self, missing_columns: list[str], source: str):
        self.missing_columns = missing_columns
        self.source = source
        super().__init__(f"{source} is missing required columns: {', '.join(missing_columns)}")


class SinkWriteError(PipelineError):
    """The cleaned output could not be written."""

    component = "writer"
