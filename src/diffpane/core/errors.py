class DiffPaneError(Exception):
    pass


class UnsupportedSourceError(DiffPaneError):
    pass


class AuthRequiredError(DiffPaneError):
    def __init__(self, source: str, host: str, message: str = "Authentication required"):
        super().__init__(message)
        self.source = source
        self.host = host


class SourceError(DiffPaneError):
    pass
