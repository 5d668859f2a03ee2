"""Local image storage beneath a fixed uploads root.

Files are written under fresh UUID names and addressed by their public path
(``/uploads/<name>``), which is what recipes store and what the static mount
serves. Disk errors are not caught here; a full disk is an infrastructure
failure and propagates.
"""

from __future__ import annotations

import asyncio
import uuid
from io import BytesIO
from pathlib import Path, PurePosixPath

from PIL import Image, ImageDraw, ImageFont

from recipe_extraction.observability.logging import get_logger


logger = get_logger(__name__)

PLACEHOLDER_SIZE = (1280, 720)
_PLACEHOLDER_BACKGROUND = (246, 238, 227)
_PLATE_COLOR = (255, 255, 255)
_RIM_COLOR = (222, 205, 186)
_TEXT_COLOR = (120, 98, 76)


def render_placeholder(size: tuple[int, int] = PLACEHOLDER_SIZE) -> bytes:
    """Render the default recipe thumbnail as JPEG bytes.

    A plain plate on a warm background with a caption, so a recipe without
    any real image still has something recognizable in card layouts.
    """
    width, height = size
    image = Image.new("RGB", size, _PLACEHOLDER_BACKGROUND)
    draw = ImageDraw.Draw(image)

    radius = min(width, height) // 3
    cx, cy = width // 2, height // 2 - height // 16
    draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=_RIM_COLOR)
    inner = int(radius * 0.78)
    draw.ellipse((cx - inner, cy - inner, cx + inner, cy + inner), fill=_PLATE_COLOR)

    font = ImageFont.load_default(size=max(24, height // 14))
    caption = "Recipe image coming soon"
    left, top, right, bottom = draw.textbbox((0, 0), caption, font=font)
    text_x = (width - (right - left)) // 2
    text_y = min(height - (bottom - top) - height // 20, cy + radius + height // 24)
    draw.text((text_x, text_y), caption, fill=_TEXT_COLOR, font=font)

    buffer = BytesIO()
    image.save(buffer, format="JPEG", quality=85)
    return buffer.getvalue()


def is_decodable_image(data: bytes) -> bool:
    """Check that ``data`` is an image Pillow can open."""
    try:
        with Image.open(BytesIO(data)) as image:
            image.verify()
    except (OSError, SyntaxError, ValueError):
        return False
    return True


class LocalImageStorage:
    """Write image bytes to disk and hand back stable public paths."""

    def __init__(
        self,
        root: Path | str,
        *,
        public_prefix: str = "/uploads",
        default_filename: str = "default-recipe-thumbnail.jpg",
    ) -> None:
        self.root = Path(root)
        self.public_prefix = "/" + public_prefix.strip("/")
        self.default_filename = default_filename

    @property
    def default_path(self) -> str:
        """Public path of the placeholder thumbnail."""
        return self.public_path(self.default_filename)

    def public_path(self, filename: str) -> str:
        return f"{self.public_prefix}/{filename}"

    def local_path(self, public_path: str) -> Path:
        """Map a public path back to the file on disk.

        Raises:
            ValueError: If the path is outside the uploads root.
        """
        prefix = f"{self.public_prefix}/"
        if not public_path.startswith(prefix):
            msg = f"Not an uploads path: {public_path}"
            raise ValueError(msg)
        name = PurePosixPath(public_path[len(prefix) :]).name
        if not name:
            msg = f"Not an uploads path: {public_path}"
            raise ValueError(msg)
        return self.root / name

    def exists(self, public_path: str) -> bool:
        try:
            return self.local_path(public_path).is_file()
        except ValueError:
            return False

    async def save(self, data: bytes, extension: str = ".jpg") -> str:
        """Store ``data`` under a new unique name and return its public path."""
        if not extension.startswith("."):
            extension = f".{extension}"
        filename = f"{uuid.uuid4()}{extension.lower()}"
        await asyncio.to_thread(self._write, self.root / filename, data)
        logger.debug("Stored image", filename=filename, size=len(data))
        return self.public_path(filename)

    async def delete(self, public_path: str) -> None:
        """Remove a stored image; missing files are ignored."""
        if public_path == self.default_path:
            return
        path = self.local_path(public_path)
        await asyncio.to_thread(path.unlink, missing_ok=True)

    async def ensure_default(self) -> str:
        """Create the placeholder on first use and return its public path."""
        path = self.root / self.default_filename
        if not path.is_file():
            data = await asyncio.to_thread(render_placeholder)
            await asyncio.to_thread(self._write, path, data)
            logger.info("Created default thumbnail", path=str(path))
        return self.default_path

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
