class UpstreamServiceError(Exception):
    """An external dependency (LLM provider, weather API) failed."""

    def __init__(self, message: str, *, service: str = "upstream") -> None:
        super().__init__(message)
        self.message = message
        self.service = service


class WeatherServiceError(UpstreamServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, service="weather")


class RateLimitExceeded(Exception):
    def __init__(self, retry_after: int) -> None:
        super().__init__(f"Rate limit exceeded, retry after {retry_after}s")
        self.retry_after = retry_after
