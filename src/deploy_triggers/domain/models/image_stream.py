"""Image stream domain models."""

from __future__ import annotations

from pydantic import Field

from deploy_triggers.domain.models.base import ValueObject


class TagEvent(ValueObject):
    """A single resolution of a tag to a concrete image."""

    image_reference: str
    image_id: str = ""


class ResolvedImage(ValueObject):
    """Most recent concrete image of a stream tag."""

    image_reference: str
    image_id: str = ""


class ImageStream(ValueObject):
    """Image stream with per-tag history, most recent event first."""

    namespace: str
    name: str
    tags: dict[str, list[TagEvent]] = Field(default_factory=dict)

    def latest_tagged_image(self, tag: str) -> ResolvedImage | None:
        events = self.tags.get(tag)
        if not events:
            return None
        latest = events[0]
        return ResolvedImage(image_reference=latest.image_reference, image_id=latest.image_id)
