"""Image stream tag resolution."""

from __future__ import annotations

import structlog

from deploy_triggers.domain.models.image_stream import ResolvedImage
from deploy_triggers.domain.ports.repositories import (
    ImageStreamNotFoundError,
    ImageStreamRepository,
)
from deploy_triggers.infrastructure.observability.metrics import IMAGE_RESOLUTIONS_TOTAL


logger = structlog.get_logger(__name__)


class ImageTagResolver:
    """Resolves a stream tag to its most recent image.

    Every call reads the stream store afresh; there is no caching and no
    retrying. A missing stream or tag resolves to ``None``, any other store
    failure propagates to the caller.
    """

    def __init__(self, image_stream_repo: ImageStreamRepository) -> None:
        self._image_stream_repo = image_stream_repo

    async def resolve(self, namespace: str, stream_name: str, tag: str) -> ResolvedImage | None:
        try:
            stream = await self._image_stream_repo.get(namespace, stream_name)
        except ImageStreamNotFoundError:
            IMAGE_RESOLUTIONS_TOTAL.labels(result="stream_not_found").inc()
            logger.debug("image_stream_not_found", namespace=namespace, stream=stream_name)
            return None

        resolved = stream.latest_tagged_image(tag)
        if resolved is None:
            IMAGE_RESOLUTIONS_TOTAL.labels(result="tag_not_found").inc()
            logger.debug("image_tag_not_found", namespace=namespace, stream=stream_name, tag=tag)
            return None

        IMAGE_RESOLUTIONS_TOTAL.labels(result="resolved").inc()
        logger.debug(
            "image_tag_resolved",
            namespace=namespace,
            stream=stream_name,
            tag=tag,
            image=resolved.image_reference,
        )
        return resolved
