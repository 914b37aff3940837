"""
Classification of model invocation errors.

Decides whether a failed call should be retried against the fallback model.
"""

from typing import Any

DEPRECATED_MARKER = "deprecated"
NOT_FOUND_MARKER = "404 Not Found"


class ModelErrorClassification:
    """What a failed model call tells us about the model itself."""

    def __init__(self, is_deprecated: bool = False, is_not_found: bool = False):
        self.is_deprecated = is_deprecated
        self.is_not_found = is_not_found

    @property
    def should_fall_back(self) -> bool:
        """A retired or unknown model is worth one retry on the fallback model."""
        return self.is_deprecated or self.is_not_found

    def __repr__(self) -> str:
        return (
            f"ModelErrorClassification(is_deprecated={self.is_deprecated}, "
            f"is_not_found={self.is_not_found})"
        )


def classify_model_error(error: BaseException) -> ModelErrorClassification:
    """
    Classify an error raised by the AI client.

    The message markers match what the Gemini API reports for retired
    models. An HTTP 404 reported by the SDK counts as not found as well.

    Args:
        error: Exception raised while calling the model.

    Returns:
        ModelErrorClassification for the error.
    """
    message = str(error)
    status_code: Any = getattr(error, "status_code", None)

    return ModelErrorClassification(
        is_deprecated=DEPRECATED_MARKER in message,
        is_not_found=NOT_FOUND_MARKER in message or status_code == 404,
    )
