"""Domain models for devbytes."""

from pydantic import BaseModel, ConfigDict, computed_field

SHORT_DESCRIPTION_LENGTH = 200

_TRAILING_PUNCTUATION = (", ", "; ", ": ", " ")


def smart_truncate(text: str, length: int) -> str:
    """Truncate text at a word boundary once it grows past ``length``.

    Whole words are kept until the accumulated text exceeds ``length``,
    so the result may run slightly over. Trailing separators are stripped
    and "..." marks that words were dropped.
    """
    words = text.split(" ")
    kept: list[str] = []
    size = 0
    has_more = False
    for word in words:
        if size > length:
            has_more = True
            break
        kept.append(word)
        size += len(word) + 1

    result = "".join(word + " " for word in kept)
    for suffix in _TRAILING_PUNCTUATION:
        if result.endswith(suffix):
            result = result[: -len(suffix)]

    if has_more:
        result += "..."
    return result


class DevByteVideo(BaseModel):
    """A DevBytes video as shown to users of the cache.

    Derived from a stored record on every read and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    url: str
    updated: str  # timestamp string as published by the playlist server
    thumbnail: str

    @computed_field
    @property
    def short_description(self) -> str:
        """Description shortened for list displays."""
        return smart_truncate(self.description, SHORT_DESCRIPTION_LENGTH)
