"""Exception hierarchy for the guessing service.

The scoring engine itself never raises; these are raised by the store
adapter and the service layer and mapped to HTTP responses in ``main``.
"""

from __future__ import annotations


class CrowdGuessError(Exception):
    """Base exception for all crowdguess errors."""


class StoreUnavailable(CrowdGuessError):
    """Raised when a key-value store read or write cannot complete."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        message = f"Failed to {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidGuess(CrowdGuessError):
    """Raised when a submitted guess is empty or too long after normalization."""


class AlreadyGuessed(CrowdGuessError):
    """Raised when a player submits a second guess on the same post."""

    def __init__(self, post_id: str, username: str):
        self.post_id = post_id
        self.username = username
        super().__init__(f"{username} has already guessed on post {post_id}")


class PromptNotFound(CrowdGuessError):
    """Raised when no custom prompt is stored for a post."""

    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Custom prompt not found for post {post_id}")


class HistoryNotFound(CrowdGuessError):
    """Raised when a post has no preserved results from a closed session."""

    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__("Historical results are no longer available for this prompt")


# ---------------------------------------------------------------------------
# Preset-prompt game
# ---------------------------------------------------------------------------


class GameSessionNotFound(CrowdGuessError):
    """Raised when a game session id is unknown or has expired."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Game session {session_id} not found or expired")


class PresetPromptNotFound(CrowdGuessError):
    def __init__(self, prompt_id: int):
        self.prompt_id = prompt_id
        super().__init__("Prompt not found")


class PromptsExhausted(CrowdGuessError):
    """Raised when every preset prompt has been served in a game session."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            "No more prompts available. All prompts have been used in this session."
        )
