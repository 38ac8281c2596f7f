class AzsnapError(Exception):
    pass


class ValidationError(AzsnapError):
    pass


class SessionError(AzsnapError):
    pass


class AzCommandError(AzsnapError):
    """An az CLI call exited non-zero."""

    def __init__(self, command, stderr):
        self.command = command
        self.stderr = stderr
        super().__init__(stderr or f"Command failed: {command}")


class ResourceNotFoundError(AzCommandError):
    pass
