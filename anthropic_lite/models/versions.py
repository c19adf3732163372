"""Model identifiers and API version enumerations."""

from __future__ import annotations

from enum import Enum

from ..core.exceptions import ApiVersionError, ModelNotSupportedError


class Model(str, Enum):
    """Claude models known to this client."""

    CLAUDE_3_5_SONNET = "claude-3-5-sonnet-20240620"
    CLAUDE_3_OPUS = "claude-3-opus-20240229"
    CLAUDE_3_SONNET = "claude-3-sonnet-20240229"
    CLAUDE_3_HAIKU = "claude-3-haiku-20240307"

    @classmethod
    def default(cls) -> Model:
        return cls.CLAUDE_3_5_SONNET

    @classmethod
    def parse(cls, value: str) -> Model:
        """Parse a model identifier.

        Raises:
            ModelNotSupportedError: If ``value`` is not a known model id
        """
        try:
            return cls(value)
        except ValueError:
            raise ModelNotSupportedError(value) from None

    def __str__(self) -> str:
        return self.value


class AnthropicVersion(str, Enum):
    """Value of the ``anthropic-version`` header."""

    LATEST = "2023-06-01"
    INITIAL = "2023-01-01"

    @classmethod
    def default(cls) -> AnthropicVersion:
        return cls.LATEST

    def __str__(self) -> str:
        return self.value


class ApiVersion(str, Enum):
    """URL path segment selecting the API version."""

    V1 = "v1"

    @classmethod
    def default(cls) -> ApiVersion:
        return cls.V1

    @classmethod
    def parse(cls, value: str) -> ApiVersion:
        """Parse an API version path segment.

        Raises:
            ApiVersionError: If ``value`` is not a supported version
        """
        try:
            return cls(value)
        except ValueError:
            raise ApiVersionError(value) from None

    def __str__(self) -> str:
        return self.value
