"""SDK target languages.

Shared by the CLI (argument choices, progress messages) and the API client
(the `language` form field).
"""

from __future__ import annotations

from enum import Enum


class SdkLanguage(str, Enum):
    """Languages the Sideko service can generate SDKs for."""

    PYTHON = "python"
    TYPESCRIPT = "typescript"
    RUST = "rust"
    GO = "go"
    JAVA = "java"
    RUBY = "ruby"

    @classmethod
    def default(cls) -> "SdkLanguage":
        return cls.PYTHON

    def emoji(self) -> str:
        return _EMOJIS[self]

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return _LABELS[self]


_EMOJIS: dict[SdkLanguage, str] = {
    SdkLanguage.PYTHON: "🐍",
    SdkLanguage.TYPESCRIPT: "🟦",
    SdkLanguage.RUST: "🦀",
    SdkLanguage.GO: "🐹",
    SdkLanguage.JAVA: "☕️",
    SdkLanguage.RUBY: "💎",
}

_LABELS: dict[SdkLanguage, str] = {
    SdkLanguage.PYTHON: "Python",
    SdkLanguage.TYPESCRIPT: "TypeScript",
    SdkLanguage.RUST: "Rust",
    SdkLanguage.GO: "Go",
    SdkLanguage.JAVA: "Java",
    SdkLanguage.RUBY: "Ruby",
}
