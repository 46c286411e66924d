class VisionError(RuntimeError):
    def __init__(self, message: str, raw_response: object | None = None):
        super().__init__(message)
        self.raw_response = raw_response


class ConfigurationError(VisionError):
    pass


class TransportError(VisionError):
    pass


class ParseError(VisionError):
    pass


class VendorError(VisionError):
    pass
