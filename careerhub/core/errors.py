"""
Domain errors raised by services.

Routes never build HTTP responses for these by hand; the exception
handlers registered in main.py translate them into the JSON error envelope.
"""


class CareerHubError(Exception):
    status_code = 500

    def __init__(self, detail: str, status_code: int = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(CareerHubError):
    """Missing field or malformed identifier."""
    status_code = 400


class NotFoundError(CareerHubError):
    status_code = 404
