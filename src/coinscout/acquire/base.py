import random
from dataclasses import dataclass
from typing import Protocol

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0",
)


def random_user_agent() -> str:
    """Pick a browser identity string at random."""
    return random.choice(USER_AGENTS)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch attempt: markup on success, an error otherwise."""

    method: str
    markup: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.markup is not None

    @classmethod
    def success(cls, method: str, markup: str) -> "FetchResult":
        return cls(method=method, markup=markup)

    @classmethod
    def failure(cls, method: str, error: str) -> "FetchResult":
        return cls(method=method, error=error)


class FetchMethod(Protocol):
    """Interface for one way of retrieving a page's markup."""

    name: str

    async def fetch(self, url: str) -> FetchResult:
        """Retrieve the markup for ``url``.

        Failures are reported through ``FetchResult.failure``, not raised.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the method."""
        ...
