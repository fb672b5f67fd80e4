"""Errors raised across the engine boundary."""


class EngineError(Exception):
    """Failure reported by the storage engine.

    The engine's message is kept verbatim and never interpreted.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
