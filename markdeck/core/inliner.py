"""Resolution of resource references into data URIs."""

from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Union
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import requests

from markdeck.core.datauri import encode, guess_mime_type
from markdeck.core.models import InvalidInputError, ResolvedResource, ResourceResolutionError

DEFAULT_TIMEOUT = 30

ReadBytes = Callable[[Path], bytes]
Fetch = Callable[[str], Tuple[bytes, str]]


def http_get(url: str, timeout: float = DEFAULT_TIMEOUT) -> Tuple[bytes, str]:
    """Fetch a remote resource.

    Returns:
        Tuple of (body, Content-Type header value)
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content, response.headers.get('Content-Type', '')


def file_url_to_path(url: str) -> Path:
    """Convert a ``file://`` URL into a local path."""
    parsed = urlparse(url)
    return Path(url2pathname(unquote(parsed.path)))


def _is_remote(locator: str) -> bool:
    return urlparse(locator).scheme in ('http', 'https')


class ResourceInliner:
    """Turns locators into data URIs, fetching each distinct locator once.

    An instance is meant to live for a single transform call; its cache is
    never shared between files.
    """

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        read_bytes: Optional[ReadBytes] = None,
        fetch: Optional[Fetch] = None,
    ):
        """Initialize ResourceInliner.

        Args:
            base_dir: Directory bare relative locators are joined with
            read_bytes: Local file reader (default: Path.read_bytes)
            fetch: HTTP GET returning (bytes, content type) (default: http_get)
        """
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.read_bytes = read_bytes or (lambda path: path.read_bytes())
        self.fetch = fetch or http_get
        self._cache: Dict[str, Union[ResolvedResource, ResourceResolutionError]] = {}

    def resolve(self, locator: str) -> ResolvedResource:
        """Read or fetch the bytes behind a locator.

        Failures are cached as well, so a missing resource costs one attempt.

        Raises:
            ResourceResolutionError: if the resource cannot be read or fetched
        """
        cached = self._cache.get(locator)
        if cached is None:
            try:
                cached = self._load(locator)
            except ResourceResolutionError as e:
                cached = e
            self._cache[locator] = cached
        if isinstance(cached, ResourceResolutionError):
            raise cached
        return cached

    def data_uri(self, locator: str) -> str:
        """Resolve a locator and encode it as a data URI.

        Raises:
            ResourceResolutionError: if the resource cannot be resolved or is empty
        """
        resource = self.resolve(locator)
        try:
            return encode(resource.data, resource.mime_type)
        except InvalidInputError as e:
            raise ResourceResolutionError(locator, str(e)) from e

    def _load(self, locator: str) -> ResolvedResource:
        if _is_remote(locator):
            return self._fetch_remote(locator)
        return self._read_local(locator)

    def _read_local(self, locator: str) -> ResolvedResource:
        if locator.startswith('file:'):
            path = file_url_to_path(locator)
        else:
            path = self.base_dir / unquote(locator.split('?', 1)[0].split('#', 1)[0])
        try:
            data = self.read_bytes(path)
        except OSError as e:
            raise ResourceResolutionError(locator, e.strerror or str(e)) from e
        return ResolvedResource(
            source_locator=locator,
            mime_type=guess_mime_type(path.name),
            data=data,
        )

    def _fetch_remote(self, locator: str) -> ResolvedResource:
        try:
            data, content_type = self.fetch(locator)
        except requests.RequestException as e:
            raise ResourceResolutionError(locator, str(e)) from e
        mime_type = content_type.split(';', 1)[0].strip()
        if not mime_type:
            mime_type = guess_mime_type(urlparse(locator).path)
        return ResolvedResource(source_locator=locator, mime_type=mime_type, data=data)
