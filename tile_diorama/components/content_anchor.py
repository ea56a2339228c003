"""Content anchor component.

Result of :func:`tile_diorama.utils.anchor.detect_content_anchor`. The anchor
describes where a sprite's visual base sits relative to its bounding box so
that asymmetric transparent margins do not push it off its tile.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ContentAnchor:
    """Visual base of a sprite.

    Attributes:
        x_offset: Horizontal distance from the image centre to the centre of
            the anchor row's solid content (negative means left of centre).
        y_padding: Transparent rows below the anchor row.
        content_width: Width of the solid content in the anchor row.
    """

    x_offset: float = 0.0
    y_padding: int = 0
    content_width: int = 0

    @property
    def is_empty(self) -> bool:
        return self.content_width == 0


EMPTY_ANCHOR = ContentAnchor()
