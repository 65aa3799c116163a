# errors.py


class ScreeningError(Exception):
    """Base class for everything the screening driver raises."""


class InvalidInputError(ScreeningError):
    """The input directory is missing. Aborts the run before any work."""


class ScannerError(ScreeningError):
    """An abricate invocation failed or produced nothing usable."""

    def __init__(self, message, cmd=None, stderr=None):
        super().__init__(message)
        self.cmd = cmd
        self.stderr = stderr

    def __str__(self):
        msg = super().__str__()
        if self.cmd:
            msg += f" ({' '.join(map(str, self.cmd))})"
        if self.stderr:
            msg += f"\nstderr:\n{self.stderr.strip()}"
        return msg


class SetupFailure(ScannerError):
    pass


class ScanFailure(ScannerError):
    pass


class SummaryFailure(ScannerError):
    pass
