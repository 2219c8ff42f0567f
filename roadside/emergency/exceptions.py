class EmergencyRequestError(Exception):
    """Base class for emergency request exceptions."""


class EmergencyRequestNotFound(EmergencyRequestError):
    """Raised when the referenced emergency request does not exist."""

    def __init__(self, request_id):
        self.request_id = request_id
        super().__init__("Emergency request not found")


class InvalidStatusTransition(EmergencyRequestError):
    """Raised when a request is not in the status a transition starts from.

    This is also what the loser of two racing transitions gets.
    """

    def __init__(self, request_id, expected, message=None):
        self.request_id = request_id
        self.expected = expected
        super().__init__(
            message or f"Emergency request {request_id} is no longer {expected}",
        )
