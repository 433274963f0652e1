class NavigationError(Exception):
    def __init__(self, url: str, attempts: int, last_cause: Exception | None = None):
        self.url = url
        self.attempts = attempts
        self.last_cause = last_cause
        self.message = f"Failed to load {url} after {attempts} attempts"
        if last_cause is not None:
            self.message += f": {last_cause}"
        super().__init__(self.message)


class RateLimitError(Exception):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Rate limit exceeded for {service}")
