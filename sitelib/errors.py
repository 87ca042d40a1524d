class SiteConfigError(Exception):
    """Base class for errors raised while configuring a Site."""


class InvalidUrlError(SiteConfigError, ValueError):
    def __init__(self, url: str, reason: str = "no host") -> None:
        super().__init__(f"Cannot extract domain from {url!r}: {reason}")
        self.url = url


class DomainNotSetError(SiteConfigError):
    """Raised when a Site is compared or hashed before it has a domain."""
