class InvalidTokenError(Exception):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid token: {reason}")


class TokenExpiredError(InvalidTokenError):
    def __init__(self):
        super().__init__("token has expired")
