class TranscoderError(Exception):
    pass


class UnsupportedSourceLocationError(TranscoderError):
    """Raised when a source cannot be resolved to a path on a local filesystem."""


class MissingDefaultsError(TranscoderError):
    def __init__(self, kind: str):
        super().__init__(f"No default options configured for derivative kind '{kind}'")
        self.kind: str = kind
