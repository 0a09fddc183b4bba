"""URL handling for links and media: canonical escaping and YouTube embeds."""

from typing import Optional
from urllib.parse import parse_qs, quote, urlparse

EMBED_PREFIX = "https://www.youtube.com/embed/"

YOUTUBE_HOSTS = frozenset({"youtube.com", "youtu.be", "youtube-nocookie.com"})

# Characters the HTML serializer writes unescaped in href and src values.
_URL_SAFE = "!*'()@/:=?;#%&,+"


def canonical_url(url: str) -> str:
    """
    Percent-encode a URL the way it is written to HTML.

    Spaces, non-ASCII characters and other characters outside the URI set
    become UTF-8 escapes; existing escapes are kept, so the result is
    stable when applied again.
    """
    return quote(url, safe=_URL_SAFE)


def _youtube_host(url: str) -> Optional[str]:
    try:
        parsed = urlparse(url.strip())
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None
    if parsed.scheme.lower() not in ("http", "https", ""):
        return None
    if host.startswith("www."):
        host = host[4:]
    if host.startswith("m."):
        host = host[2:]
    return host if host in YOUTUBE_HOSTS else None


def extract_youtube_id(url: str) -> Optional[str]:
    """
    Pull the video ID out of a watch-page, short or embed URL.

    Returns:
        The video ID, or None when the URL is not a recognized YouTube form.
    """
    host = _youtube_host(url)
    if host is None:
        return None
    parsed = urlparse(url.strip())

    if host == "youtu.be":
        video_id = parsed.path.lstrip("/").split("/")[0]
        return video_id or None

    if parsed.path == "/watch":
        values = parse_qs(parsed.query).get("v")
        return values[0] if values and values[0] else None
    for prefix in ("/embed/", "/shorts/", "/live/"):
        if parsed.path.startswith(prefix):
            video_id = parsed.path[len(prefix):].split("/")[0]
            return video_id or None
    return None


def normalize_youtube_url(url: str) -> str:
    """Canonical embed URL for a YouTube link; unrecognized URLs are returned as-is."""
    video_id = extract_youtube_id(url)
    if video_id is None:
        return url
    return f"{EMBED_PREFIX}{video_id}"


def is_youtube_url(url: str) -> bool:
    """Whether `url` points at a YouTube host, the only iframe source the HTML parser keeps."""
    return _youtube_host(url) is not None
