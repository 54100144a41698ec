"""ProductImage aggregate and the uploaded file value it is created from."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath

from protean.fields import DateTime, String

from catalog.domain import catalog


@dataclass(frozen=True)
class ImageFile:
    """An uploaded image as handed over by the request layer."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        return PurePosixPath(self.filename or "").suffix.lstrip(".").lower()

    @property
    def size(self) -> int:
        return len(self.content or b"")


@catalog.aggregate
class ProductImage:
    """Metadata record for one stored image file.

    The owning product is not stored here; ownership is the presence of the
    image id in ``Product.images``.
    """

    url: String(required=True, max_length=500)
    created_at: DateTime(default=datetime.now)
