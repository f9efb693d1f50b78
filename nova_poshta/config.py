"""Client configuration: API key, result-set limit and response language."""

import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

load_dotenv()

DEFAULT_LIMIT = 20


class Language(str, Enum):
    """Language of the localized description fields in provider responses."""

    UA = "UA"
    RU = "RU"

    @classmethod
    def parse(cls, value: "str | Language") -> "Language":
        try:
            return cls(str(getattr(value, "value", value)).strip().upper())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unsupported language: {value!r} (expected one of {choices})") from None


@dataclass(frozen=True)
class ClientConfig:
    """Settings a NovaPoshtaClient is constructed with.

    The config is immutable; the client swaps in a new instance when one of
    its setters is called.
    """

    api_key: str
    limit: int = DEFAULT_LIMIT
    language: Language = Language.UA

    @classmethod
    def from_env(
        cls,
        api_key: str | None = None,
        limit: int | str | None = None,
        language: str | Language | None = None,
    ) -> "ClientConfig":
        """Build a config from arguments, falling back to environment variables.

        Args:
            api_key: Nova Poshta API key (overrides NOVA_POSHTA_API_KEY).
            limit: Rows per page for list calls (overrides NOVA_POSHTA_LIMIT).
            language: "UA" or "RU" (overrides NOVA_POSHTA_LANGUAGE).

        Returns:
            A validated ClientConfig.
        """
        api_key = api_key or os.getenv("NOVA_POSHTA_API_KEY", "")
        if not api_key:
            raise ValueError(
                "NOVA_POSHTA_API_KEY must be set "
                "either as an argument or in a .env file."
            )

        raw_limit = limit if limit is not None else os.getenv("NOVA_POSHTA_LIMIT", DEFAULT_LIMIT)
        try:
            parsed_limit = int(raw_limit)
        except (TypeError, ValueError):
            raise ValueError(f"NOVA_POSHTA_LIMIT must be an integer, got {raw_limit!r}") from None
        if parsed_limit < 1:
            raise ValueError(f"NOVA_POSHTA_LIMIT must be at least 1, got {parsed_limit}")

        raw_language = language or os.getenv("NOVA_POSHTA_LANGUAGE", Language.UA.value)
        return cls(api_key=api_key, limit=parsed_limit, language=Language.parse(raw_language))
