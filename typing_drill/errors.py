from __future__ import annotations


class TypingDrillError(Exception):
    """Base class for every error the drill reports to the user."""

    exit_code = 1


class WordSetError(TypingDrillError):
    """The input stream did not provide enough words."""


class ConfigurationError(TypingDrillError):
    """Options or config file values that cannot produce a valid drill."""


class TerminalError(TypingDrillError):
    """The terminal session ended abnormally."""


class SessionCancelled(TypingDrillError):
    """Escape or Ctrl+C was pressed during a session."""

    exit_code = 130

    def __init__(self, message: str = "canceled") -> None:
        super().__init__(message)


class SessionFinished(RuntimeError):
    """A key was fed to a session whose cursor already reached the end."""
