class SolunarError(Exception):
    """Base error."""


class ConfigError(SolunarError):
    """Raised when the observer position, time zone or timing settings are invalid."""


class ProviderFailure(SolunarError):
    """Raised when the astronomy provider fails for a reason other than polar conditions."""

    def __init__(self, what, day, cause=None):
        self.what = what
        self.day = day
        self.cause = cause
        msg = f"could not compute {what} for {day}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
