"""
Domain errors raised by the repositories and services.
"""


class GameFrameError(Exception):
    """Base class for all domain errors."""

    message = "Something went wrong, please try again"

    def __init__(self, detail: str = None):
        super().__init__(detail or self.message)
        self.detail = detail or self.message


class NotFoundError(GameFrameError):
    """A required entity does not exist."""

    message = "Not found"


class TeamNotFoundError(NotFoundError):
    message = "Team not found"


class GameNotFoundError(NotFoundError):
    message = "Game not found"


class PlayerNotFoundError(NotFoundError):
    message = "Player not found"


class UserNotFoundError(NotFoundError):
    message = "User not found"


class CoachNotFoundError(NotFoundError):
    message = "Coach not found"


class KeyMomentNotFoundError(NotFoundError):
    message = "Key moment not found"


class TranscriptNotFoundError(NotFoundError):
    message = "Transcript not found"


class InviteNotFoundError(NotFoundError):
    message = "Invite not found"


class InvalidAccessCodeError(GameFrameError):
    """No team matches the access code."""

    message = "The access code is invalid. Please check it and try again."


class AlreadyEnrolledError(GameFrameError):
    """The player is already on the team."""

    message = "You are already enrolled in this team."


class UnknownRoleError(GameFrameError):
    """The user is neither a coach nor a player."""

    message = "Unknown user type"
