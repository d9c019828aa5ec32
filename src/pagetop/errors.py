"""Exception types for pagetop."""


class PagetopError(Exception):
    """Base class for pagetop errors."""


class MetricUnavailable(PagetopError):
    """A single metric category could not be acquired.

    Recovered locally by the sampler; never fatal.
    """

    def __init__(self, metric: str, cause: BaseException | None = None) -> None:
        self.metric = metric
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{metric} unavailable{detail}")


class RenderFailure(PagetopError):
    """The display surface cannot draw. Fatal: triggers shutdown."""
