class APIError(Exception):
    """Base API error with status code and message"""

    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv["message"] = self.message
        return rv


class NotFoundError(APIError):
    """Resource not found errors"""

    def __init__(self, message="Resource not found", status_code=404):
        super().__init__(message, status_code)


class ValidationError(APIError):
    """Invalid input that passed schema validation"""

    def __init__(self, message, errors=None, status_code=422):
        super().__init__(message, status_code, payload={"errors": errors or {}})
        self.errors = errors or {}


class ConfigurationError(APIError):
    """The application is set up in a way it cannot run with"""

    def __init__(self, message, status_code=500):
        super().__init__(message, status_code)
