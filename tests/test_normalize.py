import pytest
from hypothesis import given, strategies as st

from extraction.errors import UnsupportedItemError
from extraction.models import AlbumTrack, EpisodeTrack, MediaImage, NormalizedItem, OtherTrack
from extraction.normalize import (
    album_to_item,
    dedupe_items,
    episode_to_item,
    filter_items,
    playlist_entries_to_items,
)
from tests.support.factories import album, episode


def item(item_id: str, name: str = "x") -> NormalizedItem:
    return NormalizedItem(id=item_id, name=name, url_to_open=f"https://open.test/{item_id}")


items_strategy = st.lists(
    st.builds(item, st.sampled_from(list("abcdef")), st.text(alphabet="xyzXYZ ", max_size=8)),
    max_size=20,
)


def test_album_to_item_maps_fields():
    result = album_to_item(album("A1", "Kid A"))
    assert result == NormalizedItem(
        id="A1",
        name="Kid A",
        url_to_open="https://open.spotify.com/album/A1",
        images=(MediaImage(url="https://i.scdn.co/image/A1", width=640, height=640),),
    )


def test_episode_to_item_maps_fields():
    result = episode_to_item(episode("E1", "Pilot"))
    assert (result.id, result.name, result.url_to_open, result.images) == (
        "E1", "Pilot", "https://open.spotify.com/episode/E1", ()
    )


def test_null_image_dimensions_become_zero():
    record = album("A1")
    record["images"] = [{"url": "https://i.test/a", "width": None, "height": None}]
    assert album_to_item(record).images == (MediaImage(url="https://i.test/a", width=0, height=0),)


def test_missing_external_url_is_rejected():
    record = album("A1")
    record["external_urls"] = {}
    with pytest.raises(UnsupportedItemError, match="A1"):
        album_to_item(record)


def test_playlist_entries_map_to_albums():
    entries = [AlbumTrack(album=album("A")), AlbumTrack(album=album("B"))]
    assert [i.id for i in playlist_entries_to_items(entries)] == ["A", "B"]


def test_episode_in_playlist_is_unsupported():
    entries = [AlbumTrack(album=album("A")), EpisodeTrack(episode_id="E1", name="Pilot")]
    with pytest.raises(UnsupportedItemError, match="episode in a playlist"):
        playlist_entries_to_items(entries)


def test_unknown_playlist_payload_names_the_type():
    with pytest.raises(UnsupportedItemError, match="audiobook_chapter"):
        playlist_entries_to_items([OtherTrack(type_name="audiobook_chapter")])


def test_dedupe_keeps_first_occurrence():
    first = item("2", "first")
    result = dedupe_items([item("1"), first, item("2", "second"), item("3")])
    assert [i.id for i in result] == ["1", "2", "3"]
    assert result[1] is first


@given(items_strategy)
def test_dedupe_is_idempotent(items):
    once = dedupe_items(items)
    assert dedupe_items(once) == once
    assert len({i.id for i in once}) == len(once)
    # first-occurrence order
    expected_order = list(dict.fromkeys(i.id for i in items))
    assert [i.id for i in once] == expected_order


@given(
    items_strategy,
    st.lists(st.sampled_from(list("abcdef")), max_size=3),
    st.lists(st.text(alphabet="xyzXYZ", min_size=1, max_size=2), max_size=2),
)
def test_filter_removes_exactly_matching_items(items, ignore_ids, substrings):
    result = filter_items(items, ignore_ids, substrings)

    def ignored(i):
        return i.id in ignore_ids or any(s in i.name for s in substrings)

    assert result == [i for i in items if not ignored(i)]


def test_filter_defaults_keep_everything():
    items = [item("1"), item("2")]
    assert filter_items(items) == items


def test_filter_name_match_is_case_sensitive():
    items = [item("1", "Live at Wembley"), item("2", "live session"), item("3", "Studio")]
    assert [i.id for i in filter_items(items, ignore_name_substrings=["Live"])] == ["2", "3"]
