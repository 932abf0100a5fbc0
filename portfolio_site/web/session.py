"""
Browser-session scoped storage backed by cookies.

Cookies are written without Max-Age or Expires, so they live only as long as
the browser session, the server-rendered counterpart of ``sessionStorage``.
"""

from typing import Dict, Iterator, MutableMapping, Optional, Set

from fastapi import Request, Response

from portfolio_site.core.config import SESSION_COOKIE_SECURE

SESSION_COOKIE_PREFIX = "ss_"


class SessionStorage(MutableMapping[str, str]):
    """Dict-like view of the prefixed session cookies on one request."""

    def __init__(self, initial: Optional[Dict[str, str]] = None, prefix: str = SESSION_COOKIE_PREFIX):
        self.prefix = prefix
        self._data: Dict[str, str] = dict(initial or {})
        self._dirty: Set[str] = set()

    @classmethod
    def from_request(cls, request: Request, prefix: str = SESSION_COOKIE_PREFIX) -> "SessionStorage":
        values = {
            name[len(prefix):]: value for name, value in request.cookies.items() if name.startswith(prefix)
        }
        return cls(values, prefix=prefix)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._dirty.add(key)

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._dirty.add(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def commit(self, response: Response) -> None:
        """Write every changed key back to the client as a cookie."""
        for key in self._dirty:
            cookie_name = f"{self.prefix}{key}"
            if key in self._data:
                response.set_cookie(
                    key=cookie_name,
                    value=self._data[key],
                    httponly=True,
                    samesite="lax",
                    secure=SESSION_COOKIE_SECURE,
                )
            else:
                response.delete_cookie(
                    key=cookie_name, httponly=True, samesite="lax", secure=SESSION_COOKIE_SECURE
                )
        self._dirty.clear()
