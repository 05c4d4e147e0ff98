"""Custom exception hierarchy for trichain errors."""

from collections.abc import Sequence

import regex as re


class TriChainError(Exception):
    """Base exception for all trichain errors."""


class SnapshotError(TriChainError):
    """Raised when a serialized chain cannot be read back."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        line_no: int | None = None,
    ) -> None:
        """Initialize with optional path and line number that get appended to the message."""
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        if line_no is not None:
            extra += f"(line: {line_no}) "
        super().__init__(message + extra)
        self.model_path = model_path
        self.line_no = line_no


class EmptyModelError(TriChainError):
    """Raised when generation is requested from a chain with no sentence starts."""


class InvalidTripletError(TriChainError):
    """Raised when a triplet breaks the sentinel placement rules."""

    def __init__(
        self, message: str, *, triplet: Sequence[str] | None = None
    ) -> None:
        if triplet is not None:
            message = f"{message} (triplet: {tuple(triplet)!r})"
        super().__init__(message)
        self.triplet = tuple(triplet) if triplet is not None else None


class TokenizationError(TriChainError):
    """Raised when an external tokenizer fails."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
    ) -> None:
        extra = " "
        if command:
            extra += f"(command: {' '.join(command)}) "
        if returncode is not None:
            extra += f"(exit status: {returncode}) "
        super().__init__(message + extra)
        self.command = list(command) if command else None
        self.returncode = returncode


class PatternError(TriChainError):
    """Raised when compiling and/or looking up regex split patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        Args:
            message: Error message.
            pattern: The regex pattern that failed.
            regex_err: The underlying regex error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err
