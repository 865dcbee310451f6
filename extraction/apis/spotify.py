import base64
import logging
import time
from typing import Any

import requests

from extraction.models import AlbumTrack, EpisodeTrack, OtherTrack, PlaylistEntry

logger = logging.getLogger(__name__)


class SpotifyAPIError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SpotifyRateLimitError(SpotifyAPIError):
    """HTTP 429. `retry_after` is the server-suggested wait in seconds."""

    def __init__(self, message: str, retry_after: float) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class SpotifyAuthError(SpotifyAPIError):
    pass


class SpotifyAPI:
    """
    Thin synchronous Spotify client (pure, no file I/O).

    Auth: Client Credentials (pass client_id/client_secret via constructor).
    Throttling is not handled here: a 429 surfaces as SpotifyRateLimitError so
    the caller decides how to back off.
    """

    token_url = "https://accounts.spotify.com/api/token"
    base_url = "https://api.spotify.com/v1"

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        user_agent: str,
        timeout_secs: int,
        page_size: int = 50,
        market: str | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout_secs = timeout_secs
        self.page_size = page_size
        self.market = market

        self.session = requests.Session()
        self.session.headers["User-Agent"] = user_agent

        self.access_token = None
        self.token_expires_at = 0.0  # epoch seconds

    # -------- auth --------

    def _encode_basic(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return base64.b64encode(raw).decode("utf-8")

    def _ensure_token(self) -> None:
        if self.access_token and time.time() < self.token_expires_at - 30:
            return

        try:
            resp = self.session.post(
                self.token_url,
                headers={"Authorization": f"Basic {self._encode_basic()}"},
                data={"grant_type": "client_credentials"},
                timeout=self.timeout_secs,
            )
        except requests.RequestException as e:
            raise SpotifyAuthError(f"Authenticating with Spotify failed because: {e}") from e

        if resp.status_code != 200:
            raise SpotifyAuthError(
                f"Authenticating with Spotify failed because: {resp.status_code} {resp.text}",
                status_code=resp.status_code,
            )

        data = resp.json()
        self.access_token = data.get("access_token")
        if not self.access_token:
            raise SpotifyAuthError("Authenticating with Spotify failed because: no access_token in response")
        expires_in = int(data.get("expires_in", 3600))
        self.token_expires_at = time.time() + expires_in
        logger.debug(f"Spotify token acquired, valid for {expires_in}s")

    def authenticate(self) -> None:
        """Exchange client credentials for an access token up front."""
        self._ensure_token()

    # -------- request helper --------

    def _get(self, path_or_url: str, params: dict | None = None) -> dict:
        self._ensure_token()
        if path_or_url.startswith("http"):
            # `next` links from paging objects are absolute and carry their own query
            url = path_or_url
        else:
            url = f"{self.base_url}/{path_or_url.lstrip('/')}"
        headers = {"Authorization": f"Bearer {self.access_token}"}

        try:
            resp = self.session.get(url, headers=headers, params=params or {}, timeout=self.timeout_secs)
        except requests.RequestException as e:
            raise SpotifyAPIError(f"Spotify GET {url} failed: {e}") from e

        if resp.status_code == 429:
            retry_after = float(resp.headers.get("Retry-After", "1"))
            raise SpotifyRateLimitError(f"Spotify GET {url} rate limited", retry_after=retry_after)

        if 200 <= resp.status_code < 300:
            return resp.json()

        raise SpotifyAPIError(
            f"Spotify GET {url} failed: {resp.status_code} {resp.text}",
            status_code=resp.status_code,
        )

    # -------- public API --------

    def get_artist(self, artist_id: str) -> dict:
        return self._get(f"artists/{artist_id}")

    def get_artist_albums(self, artist_id: str) -> dict:
        """First paging object of the artist's albums."""
        return self._get(f"artists/{artist_id}/albums", {"limit": self.page_size})

    def get_playlist(self, playlist_id: str) -> dict:
        """Playlist details; `tracks` holds the first page of entries."""
        # without additional_types episodes come back disguised as tracks
        params = {"additional_types": "track,episode"}
        if self.market:
            params["market"] = self.market
        return self._get(f"playlists/{playlist_id}", params)

    def get_show(self, show_id: str) -> dict:
        """Show details; `episodes` holds the first page of episodes."""
        # client-credentials tokens have no user country, so shows need an explicit market
        return self._get(f"shows/{show_id}", {"market": self.market} if self.market else None)

    def get_page(self, next_url: str) -> dict:
        return self._get(next_url)


def parse_playlist_entry(entry: dict[str, Any]) -> PlaylistEntry | None:
    """
    Resolve a raw playlist item into its variant.
    Returns None for entries without a catalog item (removed or local tracks).
    """
    track = (entry or {}).get("track")
    if not track:
        return None

    kind = track.get("type")
    if kind == "episode" or track.get("episode") is True:
        return EpisodeTrack(episode_id=track.get("id"), name=track.get("name"))
    if kind == "track":
        if track.get("is_local"):
            return None
        return AlbumTrack(album=track.get("album") or {})
    return OtherTrack(type_name=str(kind))
