"""Exception hierarchy for the automation core."""


class BotError(Exception):
    """Base class for all hearthbot errors."""


class RecoverableHostError(BotError):
    """Host state was momentarily unusable; the next tick retries."""


class NoMissionsError(RecoverableHostError):
    """No practice scenario matched the requested difficulty."""


class FatalHostError(BotError):
    """The host reached a state it cannot recover from."""

    def __init__(self, screen):
        super().__init__(f"Host entered unrecoverable screen: {screen}")
        self.screen = screen


class UnknownModeError(BotError):
    """An operating mode outside the known set reached the dispatcher.

    This is a coding defect, not host variance, so it is never retried.
    """
