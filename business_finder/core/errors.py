"""Exception hierarchy for the business finder pipeline."""

from typing import Any, List, Optional


class BusinessFinderError(RuntimeError):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(BusinessFinderError):
    """Raised before any network activity when the run is misconfigured."""


class SearchRequestError(BusinessFinderError):
    """A nearby-search call failed for one (scope, category) pairing."""

    def __init__(self, category: str, search_location: Optional[str], cause: BaseException) -> None:
        where = f" near {search_location}" if search_location else ""
        super().__init__(f"search for {category}{where} failed: {cause}")
        self.category = category
        self.search_location = search_location
        self.cause = cause


class SearchTimeoutError(SearchRequestError):
    """The nearby-search call exceeded its request timeout."""


class DetailFetchError(BusinessFinderError):
    """A place-details call failed for a single place identifier."""

    def __init__(self, place_id: str, cause: BaseException) -> None:
        super().__init__(f"details for {place_id} failed: {cause}")
        self.place_id = place_id
        self.cause = cause


class DetailTimeoutError(DetailFetchError):
    """The place-details call exceeded its request timeout."""


class SearchDeadlineError(BusinessFinderError):
    """The whole run exceeded its deadline; ``partial`` holds what was collected."""

    def __init__(self, timeout: float, partial: List[Any]) -> None:
        super().__init__(f"search run exceeded its {timeout:g}s deadline")
        self.timeout = timeout
        self.partial = partial
