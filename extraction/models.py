from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, model_validator

# input keys whose name differs from the field once case and underscores are ignored
_KEY_ALIASES = {
    "id": "source_id",
    "ignoreshowwithstrings": "ignore_name_substrings",
}


class InputDescriptor(BaseModel):
    """
    One artist / playlist / show to snapshot, plus the front-end metadata
    that is passed through untouched to the artist file.

    Keys match case-insensitively (`ShortName`, `shortName`, `short_name`)
    and `null` counts as not given.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    short_name: StrictStr
    http_friendly_short_name: StrictStr
    type: StrictStr
    source_id: StrictStr
    icon: StrictStr
    cover_color_a: StrictStr
    cover_color_b: StrictStr
    cover_center_x: Optional[StrictInt] = None
    cover_center_y: Optional[StrictInt] = None
    alt_cover_center_x: Optional[StrictInt] = None
    alt_cover_center_y: Optional[StrictInt] = None
    ignore_ids: tuple[StrictStr, ...] = ()
    ignore_name_substrings: tuple[StrictStr, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _match_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        names = {name.replace("_", ""): name for name in cls.model_fields}
        names.update(_KEY_ALIASES)

        matched: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            name = names.get(str(key).lower().replace("_", ""))
            if name is None:
                continue
            previous = matched.get(name)
            if isinstance(previous, (list, tuple)) and isinstance(value, (list, tuple)):
                # IgnoreShowWithStrings and IgnoreNameSubstrings both given
                value = [*previous, *value]
            matched[name] = value
        return matched


@dataclass(frozen=True)
class MediaImage:
    url: str
    width: int
    height: int

    @classmethod
    def from_api(cls, image: dict[str, Any]) -> "MediaImage":
        # Spotify sends null dimensions for most user-uploaded playlist covers
        return cls(
            url=image["url"],
            width=int(image.get("width") or 0),
            height=int(image.get("height") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"Url": self.url, "Height": self.height, "Width": self.width}


@dataclass(frozen=True)
class NormalizedItem:
    id: str
    name: str
    url_to_open: str
    images: tuple[MediaImage, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "Id": self.id,
            "Name": self.name,
            "UrlToOpen": self.url_to_open,
            "Images": [img.to_dict() for img in self.images],
        }


@dataclass(frozen=True)
class ArtistLikeOutput:
    descriptor: InputDescriptor
    name: str
    images: tuple[MediaImage, ...] = ()

    @property
    def source_id(self) -> str:
        return self.descriptor.source_id

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize with the PascalCase keys the front-end reads.
        Optional cover coordinates are left out when unset.
        """
        d = self.descriptor
        row: dict[str, Any] = {
            "ShortName": d.short_name,
            "HttpFriendlyShortName": d.http_friendly_short_name,
            "Type": d.type,
            "Id": d.source_id,
            "Icon": d.icon,
        }
        optional = {
            "CoverCenterX": d.cover_center_x,
            "CoverCenterY": d.cover_center_y,
            "AltCoverCenterX": d.alt_cover_center_x,
            "AltCoverCenterY": d.alt_cover_center_y,
        }
        row.update({k: v for k, v in optional.items() if v is not None})
        row["CoverColorA"] = d.cover_color_a
        row["CoverColorB"] = d.cover_color_b
        row["Name"] = self.name
        row["Images"] = [img.to_dict() for img in self.images]
        return row


@dataclass(frozen=True)
class RetrievalResult:
    artist_like: ArtistLikeOutput
    items: tuple[NormalizedItem, ...] = ()


# -------- playlist entry variants --------

@dataclass(frozen=True)
class AlbumTrack:
    album: dict[str, Any]


@dataclass(frozen=True)
class EpisodeTrack:
    episode_id: str | None
    name: str | None


@dataclass(frozen=True)
class OtherTrack:
    type_name: str


PlaylistEntry = Union[AlbumTrack, EpisodeTrack, OtherTrack]
