"""Failure taxonomy for the copy review service."""

from typing import Optional


class CopyReviewError(Exception):
    """Base class for every failure raised by the service."""


class ConfigurationError(CopyReviewError):
    """Settings do not allow a provider call to be made."""


# ----------------------------------------------------------------------
# Provider failures
# ----------------------------------------------------------------------
class ProviderError(CopyReviewError):
    """A provider call failed before usable text came back."""

    def __init__(
        self,
        message: str,
        *,
        transport: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.transport = transport
        self.status = status


class AuthError(ProviderError):
    """Credential missing, invalid or expired."""


class RateLimitError(ProviderError):
    """Provider rejected the call for rate reasons; resubmit later."""


class NotFoundError(ProviderError):
    """Requested model is not available to the credential."""


class OverloadError(ProviderError):
    """Provider is temporarily out of capacity."""


class ProviderTimeoutError(ProviderError):
    """No response arrived within the configured bound."""


class TransportError(ProviderError):
    """Any other transport or HTTP failure."""


class TruncatedResponseError(ProviderError):
    """Completion stopped on the length limit and cannot be trusted."""


# ----------------------------------------------------------------------
# Response failures
# ----------------------------------------------------------------------
class ResponseError(CopyReviewError):
    """Model text came back but could not be turned into a result."""

    def __init__(self, message: str, *, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ParseError(ResponseError):
    """No JSON object could be recovered from the model text."""


class StructureError(ResponseError):
    """Recovered JSON lacks fields downstream consumers need."""


class AnalysisFailedError(CopyReviewError):
    """The combined review + improve run failed in one of its steps."""

    def __init__(self, message: str, *, step: str) -> None:
        super().__init__(message)
        self.step = step


__all__ = [
    "CopyReviewError",
    "ConfigurationError",
    "ProviderError",
    "AuthError",
    "RateLimitError",
    "NotFoundError",
    "OverloadError",
    "ProviderTimeoutError",
    "TransportError",
    "TruncatedResponseError",
    "ResponseError",
    "ParseError",
    "StructureError",
    "AnalysisFailedError",
]
