from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .config import Site


class Task(Protocol):
    def get_uuid(self) -> str: ...

    def get_site(self) -> "Site": ...


@dataclass(frozen=True)
class SiteTask:
    """Task view of a Site. Holds the Site itself, not a copy."""

    site: "Site"

    def get_uuid(self) -> str:
        return self.site.domain

    def get_site(self) -> "Site":
        return self.site
