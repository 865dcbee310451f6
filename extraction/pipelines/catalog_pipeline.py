from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable
import logging

from common.utils.helper import describe_exception
from common.utils.io import reset_dir, write_json
from extraction.apis.pagination import collect_all
from extraction.apis.rate_limit import (
    DEFAULT_EXTRA_WAIT_SECS,
    DEFAULT_MAX_ATTEMPTS,
    perform_rate_limit_aware_request,
)
from extraction.apis.spotify import SpotifyAPI, parse_playlist_entry
from extraction.errors import BatchRetrievalError, RetrievalError, UnknownInputTypeError
from extraction.models import ArtistLikeOutput, InputDescriptor, NormalizedItem, RetrievalResult
from extraction.normalize import (
    EXTERNAL_URL_KEY,
    album_to_item,
    dedupe_items,
    episode_to_item,
    filter_items,
    map_images,
    playlist_entries_to_items,
)

logger = logging.getLogger(__name__)

ARTIST_FILENAME = "artist"
ITEMS_FILENAME = "albums"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    extra_wait_secs: float = DEFAULT_EXTRA_WAIT_SECS

    @classmethod
    def from_config(cls, cfg_spotify: dict) -> "RetryPolicy":
        retry = cfg_spotify.get("retry") or {}
        return cls(
            max_attempts=int(retry.get("max_attempts", DEFAULT_MAX_ATTEMPTS)),
            extra_wait_secs=float(retry.get("extra_wait_secs", DEFAULT_EXTRA_WAIT_SECS)),
        )


def _request(action, retry: RetryPolicy):
    return perform_rate_limit_aware_request(
        action,
        max_attempts=retry.max_attempts,
        extra_wait_secs=retry.extra_wait_secs,
    )


def _drain(api: SpotifyAPI, first_page: dict, retry: RetryPolicy) -> list:
    return collect_all(
        first_page or {},
        api.get_page,
        max_attempts=retry.max_attempts,
        extra_wait_secs=retry.extra_wait_secs,
    )


def _finish(
    descriptor: InputDescriptor, details: dict, items: Iterable[NormalizedItem]
) -> RetrievalResult:
    """Dedupe + filter the items and attach them to the artist-like header."""
    artist_like = ArtistLikeOutput(
        descriptor=descriptor,
        name=details.get("name") or "",
        images=map_images(details.get("images")),
    )
    kept = filter_items(
        dedupe_items(items),
        descriptor.ignore_ids,
        descriptor.ignore_name_substrings,
    )
    return RetrievalResult(artist_like=artist_like, items=tuple(kept))


# -------- retrievers --------

def retrieve_artist(
    api: SpotifyAPI, descriptor: InputDescriptor, *, retry: RetryPolicy, url_key: str
) -> RetrievalResult:
    artist = _request(lambda: api.get_artist(descriptor.source_id), retry)
    first_page = _request(lambda: api.get_artist_albums(descriptor.source_id), retry)
    albums = _drain(api, first_page, retry)
    items = [album_to_item(a, url_key) for a in albums]
    return _finish(descriptor, artist, items)


def retrieve_playlist(
    api: SpotifyAPI, descriptor: InputDescriptor, *, retry: RetryPolicy, url_key: str
) -> RetrievalResult:
    playlist = _request(lambda: api.get_playlist(descriptor.source_id), retry)
    raw_entries = _drain(api, playlist.get("tracks"), retry)

    entries = []
    for raw in raw_entries:
        entry = parse_playlist_entry(raw)
        if entry is None:
            logger.warning(f"Playlist {descriptor.source_id}: skipping entry without catalog track")
            continue
        entries.append(entry)

    items = playlist_entries_to_items(entries, url_key)
    return _finish(descriptor, playlist, items)


def retrieve_show(
    api: SpotifyAPI, descriptor: InputDescriptor, *, retry: RetryPolicy, url_key: str
) -> RetrievalResult:
    show = _request(lambda: api.get_show(descriptor.source_id), retry)
    episodes = _drain(api, show.get("episodes"), retry)
    # unavailable episodes come back as null
    items = [episode_to_item(e, url_key) for e in episodes if e]
    return _finish(descriptor, show, items)


Retriever = Callable[..., RetrievalResult]

RETRIEVERS: dict[str, Retriever] = {
    "artist": retrieve_artist,
    "playlist": retrieve_playlist,
    "show": retrieve_show,
}


def retrieve_for_descriptor(
    api: SpotifyAPI,
    descriptor: InputDescriptor,
    *,
    retry: RetryPolicy | None = None,
    url_key: str = EXTERNAL_URL_KEY,
) -> RetrievalResult:
    """
    Dispatch on the descriptor type. Every failure comes back as a
    RetrievalError naming the descriptor.
    """
    retry = retry or RetryPolicy()
    kind = descriptor.type.lower()
    retriever = RETRIEVERS.get(kind)
    if retriever is None:
        raise UnknownInputTypeError(f"Input type {descriptor.type} is unknown")

    try:
        return retriever(api, descriptor, retry=retry, url_key=url_key)
    except Exception as e:
        raise RetrievalError(
            f"Could not retrieve data for {kind} {descriptor.source_id} because: {describe_exception(e)}"
        ) from e


def run_batch(
    api: SpotifyAPI,
    descriptors: Iterable[InputDescriptor],
    *,
    retry: RetryPolicy | None = None,
    url_key: str = EXTERNAL_URL_KEY,
) -> list[RetrievalResult]:
    """
    Retrieve every descriptor in order, one at a time.
    All-or-nothing: if any descriptor fails, BatchRetrievalError carries
    every failure message and no results are returned.
    """
    results: list[RetrievalResult] = []
    errors: list[str] = []

    for descriptor in descriptors:
        logger.info(f"Retrieving data for {descriptor.type} {descriptor.source_id}")
        try:
            results.append(retrieve_for_descriptor(api, descriptor, retry=retry, url_key=url_key))
        except RetrievalError as e:
            logger.error(str(e))
            errors.append(str(e))
            continue
        logger.info(f"Finished retrieving data for {descriptor.type} {descriptor.source_id}")

    if errors:
        raise BatchRetrievalError(errors)
    return results


# -------- persistence --------

def save_output(base_dir: Path, result: RetrievalResult) -> None:
    out_dir = base_dir / result.artist_like.source_id
    write_json(out_dir / ARTIST_FILENAME, result.artist_like.to_dict())
    write_json(out_dir / ITEMS_FILENAME, [item.to_dict() for item in result.items])


def save_all_outputs(base_dir: Path, results: Iterable[RetrievalResult]) -> None:
    """
    Replace the contents of `base_dir` with one folder per result.
    """
    base_dir = Path(base_dir)
    logger.info(f"Removing previous output in {base_dir}")
    reset_dir(base_dir)

    count = 0
    for result in results:
        save_output(base_dir, result)
        count += 1
    logger.info(f"Finished writing {count} output folder(s)")
