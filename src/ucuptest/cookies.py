"""
Cookie jar helpers.

Only the leading ``name=value`` pair of a Set-Cookie header is kept;
attributes such as Path, Expires or HttpOnly are ignored.
"""

import httpx


def build_cookie_header(cookies: dict[str, str]) -> str:
    """Render stored cookies as a Cookie header value."""
    return "; ".join(f"{name}={value}" for name, value in cookies.items())


def parse_set_cookie(header: str) -> tuple[str, str] | None:
    """Extract ``(name, value)`` from one Set-Cookie header value."""
    pair = header.split(";", 1)[0].strip()
    if not pair:
        return None
    name, _, value = pair.partition("=")
    name = name.strip()
    if not name:
        return None
    return name, value.strip()


def harvest_cookies(response: httpx.Response, cookies: dict[str, str]) -> list[str]:
    """Merge every Set-Cookie of ``response`` into ``cookies``.

    Returns the names that were set, in header order.
    """
    names = []
    for header in response.headers.get_list("set-cookie"):
        parsed = parse_set_cookie(header)
        if parsed is None:
            continue
        name, value = parsed
        cookies[name] = value
        names.append(name)
    return names
