import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from .errors import DomainNotSetError
from .parsing import UrlTools
from .types import SiteTask


logger = logging.getLogger(__name__)

DEFAULT_SLEEP_TIME = 3000
DEFAULT_TIME_OUT = 2000
# Shared by every Site that never calls set_accept_status_codes.
DEFAULT_STATUS_CODES: FrozenSet[int] = frozenset({200})


class HeaderConst:
    REFERER = "Referer"


@dataclass(eq=False)
class Site:
    """Settings for crawling one site.

    Built with chained calls::

        site = Site.me().add_start_url("https://example.com/").set_retry_times(3)

    Times are in milliseconds. ``domain`` is taken from the first start URL
    unless it was set explicitly. Equality and hashing only look at
    ``domain``, ``start_urls``, ``user_agent``, ``charset`` and
    ``accept_status_codes``.
    """

    domain: Optional[str] = None
    user_agent: Optional[str] = None
    cookies: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    charset: Optional[str] = None
    start_urls: List[str] = field(default_factory=list)
    sleep_time: int = DEFAULT_SLEEP_TIME
    retry_times: int = 0
    cycle_retry_times: int = 0
    time_out: int = DEFAULT_TIME_OUT
    accept_status_codes: FrozenSet[int] = DEFAULT_STATUS_CODES

    def __post_init__(self) -> None:
        if not isinstance(self.accept_status_codes, frozenset):
            self.accept_status_codes = frozenset(self.accept_status_codes)
        if self.domain is None and self.start_urls:
            self.domain = UrlTools.get_domain(self.start_urls[0])

    @classmethod
    def me(cls) -> "Site":
        return cls()

    def add_cookie(self, name: str, value: str) -> "Site":
        self.cookies[name] = value
        return self

    def add_header(self, key: str, value: str) -> "Site":
        """Put a header for the downloader. See HeaderConst for common keys.

        Cookies and the user agent have their own setters.
        """
        self.headers[key] = value
        return self

    def set_user_agent(self, user_agent: Optional[str]) -> "Site":
        self.user_agent = user_agent
        return self

    def set_domain(self, domain: Optional[str]) -> "Site":
        self.domain = domain
        return self

    def set_charset(self, charset: Optional[str]) -> "Site":
        """None means the charset is detected from the response."""
        self.charset = charset
        return self

    def set_time_out(self, time_out: int) -> "Site":
        self.time_out = time_out
        return self

    def set_sleep_time(self, sleep_time: int) -> "Site":
        self.sleep_time = sleep_time
        return self

    def set_retry_times(self, retry_times: int) -> "Site":
        self.retry_times = retry_times
        return self

    def set_cycle_retry_times(self, cycle_retry_times: int) -> "Site":
        """Times a failed request goes back to the scheduler, for schedulers that requeue."""
        self.cycle_retry_times = cycle_retry_times
        return self

    def set_accept_status_codes(self, codes: Iterable[int]) -> "Site":
        self.accept_status_codes = frozenset(codes)
        return self

    def add_start_url(self, url: str) -> "Site":
        if self.domain is None:
            # parse before appending so a bad url leaves the site untouched
            self.domain = UrlTools.get_domain(url)
            logger.debug("Inferred domain %s from %s", self.domain, url)
        self.start_urls.append(url)
        return self

    def add_start_urls(self, *urls: str) -> "Site":
        for url in urls:
            self.add_start_url(url)
        return self

    def is_accepted(self, status: int) -> bool:
        return status in self.accept_status_codes

    def to_task(self) -> SiteTask:
        return SiteTask(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "user_agent": self.user_agent,
            "cookies": dict(self.cookies),
            "headers": dict(self.headers),
            "charset": self.charset,
            "start_urls": list(self.start_urls),
            "sleep_time": self.sleep_time,
            "retry_times": self.retry_times,
            "cycle_retry_times": self.cycle_retry_times,
            "time_out": self.time_out,
            "accept_status_codes": sorted(self.accept_status_codes),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Site":
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown site fields: {', '.join(sorted(unknown))}")
        site = cls.me()
        if data.get("domain") is not None:
            site.set_domain(data["domain"])
        site.set_user_agent(data.get("user_agent"))
        site.set_charset(data.get("charset"))
        for name, value in (data.get("cookies") or {}).items():
            site.add_cookie(name, value)
        for key, value in (data.get("headers") or {}).items():
            site.add_header(key, value)
        site.add_start_urls(*(data.get("start_urls") or []))
        site.set_sleep_time(data.get("sleep_time", DEFAULT_SLEEP_TIME))
        site.set_retry_times(data.get("retry_times", 0))
        site.set_cycle_retry_times(data.get("cycle_retry_times", 0))
        site.set_time_out(data.get("time_out", DEFAULT_TIME_OUT))
        if data.get("accept_status_codes") is not None:
            site.set_accept_status_codes(data["accept_status_codes"])
        return site

    def _identity(self) -> tuple:
        if self.domain is None:
            raise DomainNotSetError("Site has no domain; set one or add a start URL first")
        return (
            self.domain,
            tuple(self.start_urls),
            self.user_agent,
            self.charset,
            frozenset(self.accept_status_codes),
        )

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Site):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())
