"""Exceptions raised by the CPU core."""


class InternalError(RuntimeError):
    """Raised when the core reaches a state that should be impossible."""

    def __init__(self, message: str = "internal error") -> None:
        super().__init__(message)


class NotImplementedFeature(NotImplementedError):
    """Raised when a feature of the processor is not supported yet."""

    def __init__(self, message: str = "not implemented") -> None:
        super().__init__(message)