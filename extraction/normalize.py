from typing import Any, Iterable

from extraction.errors import UnsupportedItemError
from extraction.models import (
    AlbumTrack,
    EpisodeTrack,
    MediaImage,
    NormalizedItem,
    OtherTrack,
    PlaylistEntry,
)


EXTERNAL_URL_KEY = "spotify"


def map_images(images: Iterable[dict[str, Any]] | None) -> tuple[MediaImage, ...]:
    return tuple(MediaImage.from_api(img) for img in images or [])


def _record_to_item(record: dict[str, Any], url_key: str) -> NormalizedItem:
    urls = record.get("external_urls") or {}
    if url_key not in urls:
        raise UnsupportedItemError(
            f"{record.get('type', 'item')} {record.get('id')} has no '{url_key}' external url"
        )
    return NormalizedItem(
        id=record["id"],
        name=record.get("name") or "",
        url_to_open=urls[url_key],
        images=map_images(record.get("images")),
    )


def album_to_item(album: dict[str, Any], url_key: str = EXTERNAL_URL_KEY) -> NormalizedItem:
    return _record_to_item(album, url_key)


def episode_to_item(episode: dict[str, Any], url_key: str = EXTERNAL_URL_KEY) -> NormalizedItem:
    return _record_to_item(episode, url_key)


def playlist_entries_to_items(
    entries: Iterable[PlaylistEntry], url_key: str = EXTERNAL_URL_KEY
) -> list[NormalizedItem]:
    """
    Map playlist entries to the albums they belong to.
    Episodes and unknown payloads abort the whole playlist.
    """
    items: list[NormalizedItem] = []
    for entry in entries:
        if isinstance(entry, AlbumTrack):
            items.append(album_to_item(entry.album, url_key))
        elif isinstance(entry, EpisodeTrack):
            raise UnsupportedItemError(
                f"Found an episode in a playlist ({entry.episode_id} '{entry.name}'). "
                "This might be valid but is not supported currently"
            )
        elif isinstance(entry, OtherTrack):
            raise UnsupportedItemError(f"Found an unknown type of playable item: {entry.type_name}")
        else:
            raise TypeError(f"Unhandled playlist entry variant: {type(entry).__name__}")
    return items


def dedupe_items(items: Iterable[NormalizedItem]) -> list[NormalizedItem]:
    """First occurrence per id wins; order is preserved."""
    seen: set[str] = set()
    unique: list[NormalizedItem] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def filter_items(
    items: Iterable[NormalizedItem],
    ignore_ids: Iterable[str] = (),
    ignore_name_substrings: Iterable[str] = (),
) -> list[NormalizedItem]:
    """
    Drop items whose id is ignored or whose name contains an ignored
    substring (case-sensitive).
    """
    ids = set(ignore_ids)
    substrings = list(ignore_name_substrings)
    kept = []
    for item in items:
        if item.id in ids:
            continue
        if any(s in item.name for s in substrings):
            continue
        kept.append(item)
    return kept
