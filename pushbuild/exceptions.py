from pushbuild.schemas import Output, SetupErrorKind


class ConfigurationError(Exception):
    pass


class LedgerError(Exception):
    pass


class SetupError(Exception):
    """A submission could not be prepared for its run and test phases."""

    kind: SetupErrorKind
    message: str
    output: Output | None

    def __init__(
        self, kind: SetupErrorKind, message: str, output: Output | None = None
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.output = output
