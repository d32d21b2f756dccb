import logging


# Library logger - no configuration, user controls output
logger = logging.getLogger(__name__)


class TrajconBaseError(Exception):
    """
    Base class for all trajcon-specific errors.

    Every trajcon exception inherits from this class, so a single except clause
    catches any error raised while building constraint blocks.

    Args:
        message: The error message describing what went wrong
        context: Optional additional context about where the error occurred
    """

    def __init__(self, message: str, context: str | None = None) -> None:
        self.message = message
        self.context = context

        logger.debug("trajcon exception: %s", self._format_message())
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with optional context."""
        if self.context:
            return f"{self.message} (Context: {self.context})"
        return self.message


class ConfigurationError(TrajconBaseError):
    """
    Raised when a constraint block is constructed with inconsistent parameters.

    Dimensions, time indices and goal vectors are construction-time contracts.
    Violations are reported here, before any trajectory is evaluated.

    Examples:
        - Goal vector shorter than the kinematic dimension
        - Time index outside the trajectory
        - Position and velocity slots that do not fit in a point
        - Non-positive time step
    """

    pass


class DataIntegrityError(TrajconBaseError):
    """
    Raised when arrays handed between components disagree in shape or length.

    Examples:
        - Gradient values whose length differs from the recorded sparsity
        - A point whose length is not position + velocity + control
    """

    pass
