"""Custom phrasecast exceptions."""


class PhrasecastError(Exception):
    """Base exception for phrasecast errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class ConfigError(PhrasecastError):
    """Exception raised when the configuration file is missing values or invalid."""

    pass


class TranslationError(PhrasecastError):
    """Exception raised when the translator cannot produce a translation.

    This typically occurs when:
    - The translation API is unreachable or times out
    - The API key is missing or rejected
    - The reply is empty or malformed
    """

    pass


class SynthesisError(PhrasecastError):
    """Base exception for speech synthesis failures."""

    pass


class SynthesisAuthError(SynthesisError):
    """Exception raised for synthesis provider authentication failures.

    This typically occurs when:
    - API key is missing or invalid
    - Account has insufficient credits
    """

    pass


class SynthesisAPIError(SynthesisError):
    """Exception raised for synthesis API communication errors.

    This typically occurs when:
    - API server is unavailable (5xx errors)
    - Rate limits are exceeded (429 error)
    - Request format is invalid (4xx errors)
    - Network connectivity issues
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class DeliveryError(PhrasecastError):
    """Exception raised when a lesson cannot be handed to its destination."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code
