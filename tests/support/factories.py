from extraction.apis.spotify import SpotifyAPIError, SpotifyRateLimitError
from extraction.models import InputDescriptor


def album(album_id: str, name: str | None = None) -> dict:
    return {
        "id": album_id,
        "type": "album",
        "name": name or f"Album {album_id}",
        "external_urls": {"spotify": f"https://open.spotify.com/album/{album_id}"},
        "images": [{"url": f"https://i.scdn.co/image/{album_id}", "width": 640, "height": 640}],
    }


def episode(episode_id: str, name: str | None = None) -> dict:
    return {
        "id": episode_id,
        "type": "episode",
        "name": name or f"Episode {episode_id}",
        "external_urls": {"spotify": f"https://open.spotify.com/episode/{episode_id}"},
        "images": [],
    }


def track_on(album_record: dict, track_id: str = "t") -> dict:
    return {"track": {"id": track_id, "type": "track", "is_local": False, "album": album_record}}


def make_pages(items: list, limit: int, url_prefix: str) -> tuple[dict, dict[str, dict]]:
    """
    Split `items` into Spotify paging objects of `limit` items.
    Returns the first page and a url -> page map for the rest.
    """
    chunks = [items[i:i + limit] for i in range(0, len(items), limit)] or [[]]
    urls = [f"{url_prefix}?offset={i * limit}&limit={limit}" for i in range(len(chunks))]
    pages = []
    for i, chunk in enumerate(chunks):
        pages.append({
            "items": chunk,
            "limit": limit,
            "offset": i * limit,
            "total": len(items),
            "next": urls[i + 1] if i + 1 < len(chunks) else None,
        })
    return pages[0], {urls[i]: pages[i] for i in range(1, len(pages))}


def descriptor(kind: str = "artist", source_id: str = "X", **kwargs) -> InputDescriptor:
    fields = dict(
        short_name=f"{kind}-{source_id}",
        http_friendly_short_name=f"{kind}-{source_id}".lower(),
        type=kind,
        source_id=source_id,
        icon="icon.svg",
        cover_color_a="#000000",
        cover_color_b="#ffffff",
    )
    fields.update(kwargs)
    return InputDescriptor(**fields)


class FakeSpotifyAPI:
    """In-memory stand-in for SpotifyAPI keyed by resource id."""

    def __init__(self, *, page_size: int = 2) -> None:
        self.page_size = page_size
        self.artists: dict[str, dict] = {}
        self.artist_albums: dict[str, dict] = {}
        self.playlists: dict[str, dict] = {}
        self.shows: dict[str, dict] = {}
        self.pages: dict[str, dict] = {}
        self.throttle: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []

    # -------- setup --------

    def add_artist(self, artist_id: str, albums: list[dict], name: str = "Some Artist") -> None:
        self.artists[artist_id] = {"id": artist_id, "name": name, "images": []}
        first, rest = make_pages(albums, self.page_size, f"https://api.test/artists/{artist_id}/albums")
        self.artist_albums[artist_id] = first
        self.pages.update(rest)

    def add_playlist(self, playlist_id: str, entries: list[dict], name: str = "Some Playlist") -> None:
        first, rest = make_pages(entries, self.page_size, f"https://api.test/playlists/{playlist_id}/tracks")
        self.playlists[playlist_id] = {
            "id": playlist_id,
            "name": name,
            "images": [{"url": "https://i.test/p", "width": None, "height": None}],
            "tracks": first,
        }
        self.pages.update(rest)

    def add_show(self, show_id: str, episodes: list[dict], name: str = "Some Show") -> None:
        first, rest = make_pages(episodes, self.page_size, f"https://api.test/shows/{show_id}/episodes")
        self.shows[show_id] = {"id": show_id, "name": name, "images": [], "episodes": first}
        self.pages.update(rest)

    # -------- API surface --------

    def _serve(self, kind: str, key: str, table: dict) -> dict:
        self.calls.append((kind, key))
        remaining = self.throttle.get(key, 0)
        if remaining:
            self.throttle[key] = remaining - 1
            raise SpotifyRateLimitError(f"throttled {key}", retry_after=1)
        if key not in table:
            raise SpotifyAPIError(f"404 {kind} {key} not found", status_code=404)
        return table[key]

    def get_artist(self, artist_id: str) -> dict:
        return self._serve("artist", artist_id, self.artists)

    def get_artist_albums(self, artist_id: str) -> dict:
        return self._serve("artist_albums", artist_id, self.artist_albums)

    def get_playlist(self, playlist_id: str) -> dict:
        return self._serve("playlist", playlist_id, self.playlists)

    def get_show(self, show_id: str) -> dict:
        return self._serve("show", show_id, self.shows)

    def get_page(self, next_url: str) -> dict:
        return self._serve("page", next_url, self.pages)
