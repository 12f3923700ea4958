class BytecodeFormatError(ValueError):
    """Raised when a bytecode listing cannot be parsed back into instructions."""

    def __init__(self, message: str, line: int = 0):
        if line:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


__all__ = ["BytecodeFormatError"]
