
class ScheduleUpstreamError(RuntimeError):
    """Raised when the mentoring API fails (timeouts, network errors, non-2xx responses)."""
    pass


class ScheduleContractError(RuntimeError):
    """Raised when the mentoring API answers with an unexpected shape (e.g. no session id)."""
    pass
