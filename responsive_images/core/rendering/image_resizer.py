"""
Image Resizer
=============

Pillow-based resize primitive for responsive images.
Decodes a source raster once and writes one proportionally resized file per
requested width, returning the variants in request order.
"""

from typing import Any, Dict, List, Sequence, Type, Union
import asyncio
import hashlib
import io
import os
from abc import ABC, abstractmethod
from pathlib import Path
from tempfile import NamedTemporaryFile

from PIL import Image, ImageOps

from responsive_images.config.logging import get_logger
from responsive_images.models.schemas import ImageVariant, OutputFormat, ResizeOptions

logger = get_logger(__name__)

HASH_LENGTH = 10


class ImageResizeError(Exception):
    """Exception raised when a source image cannot be resized or written."""

    pass


class BaseImageResizer(ABC):
    """Abstract base class for resize primitives."""

    @abstractmethod
    async def resize(
        self, source: Union[str, Path], widths: Sequence[int], options: ResizeOptions
    ) -> List[ImageVariant]:
        """Produce one variant per width, in the order given."""
        pass


class PillowImageResizer(BaseImageResizer):
    """Pillow implementation writing variants under ``options.output_dir``."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(resizer="pillow")  # structlog.BoundLoggerBase

    async def resize(
        self, source: Union[str, Path], widths: Sequence[int], options: ResizeOptions
    ) -> List[ImageVariant]:
        """
        Resize a source image to each requested width.

        Args:
            source: Path of the source raster
            widths: Requested widths, not reordered or deduplicated
            options: Output format, directory, URL prefix and quality

        Returns:
            One ImageVariant per requested width, in request order

        Raises:
            ImageResizeError: If the source is unreadable or a variant cannot be written
        """
        source_path = Path(source)
        try:
            self.logger.info(
                "Resizing image",
                source=str(source_path),
                widths=list(widths),
                format=options.output_format.value,
            )

            # Decoding and encoding are CPU bound; keep them off the event loop
            variants = await asyncio.to_thread(
                self._resize_sync, source_path, list(widths), options
            )

            self.logger.info(
                "Image resize completed", source=str(source_path), variants=len(variants)
            )
            return variants

        except ImageResizeError as e:
            self.logger.error("Image resize failed", source=str(source_path), error=str(e))
            raise
        except Exception as e:
            error_msg = f"Resizing {source_path} failed: {e}"
            self.logger.error("Image resize failed", source=str(source_path), error=error_msg)
            raise ImageResizeError(error_msg) from e

    def _resize_sync(
        self, source: Path, widths: List[int], options: ResizeOptions
    ) -> List[ImageVariant]:
        if not source.is_file():
            raise ImageResizeError(f"Source image not found: {source}")

        data = source.read_bytes()
        digest = self._content_hash(data, options)
        options.output_dir.mkdir(parents=True, exist_ok=True)

        variants: List[ImageVariant] = []
        with Image.open(io.BytesIO(data)) as opened:
            image = ImageOps.exif_transpose(opened)
            source_width, source_height = image.size

            for width in widths:
                pixel_width, pixel_height = self._target_size(
                    width, source_width, source_height
                )
                filename = f"{digest}-{width}.{options.output_format.extension}"
                output_path = options.output_dir / filename

                if options.overwrite_existing or not output_path.exists():
                    resized = image
                    if (pixel_width, pixel_height) != image.size:
                        resized = image.resize(
                            (pixel_width, pixel_height), Image.Resampling.LANCZOS
                        )
                    self._save(resized, output_path, options)
                    self.logger.debug(
                        "Variant written",
                        path=str(output_path),
                        width=pixel_width,
                        height=pixel_height,
                    )
                else:
                    self.logger.debug("Variant reused", path=str(output_path))

                variants.append(
                    ImageVariant(
                        width=width,
                        url=self._join_url(options.url_path, filename),
                        output_path=output_path,
                        pixel_width=pixel_width,
                        pixel_height=pixel_height,
                        format=options.output_format,
                    )
                )

        return variants

    @staticmethod
    def _target_size(width: int, source_width: int, source_height: int) -> tuple[int, int]:
        """Proportional size for a requested width, never larger than the source."""
        pixel_width = min(width, source_width)
        pixel_height = max(1, round(source_height * pixel_width / source_width))
        return pixel_width, pixel_height

    @staticmethod
    def _content_hash(data: bytes, options: ResizeOptions) -> str:
        """Stable file name prefix for a source and its encoder options."""
        digest = hashlib.sha256(data)
        digest.update(f"{options.output_format.value}:{options.quality}".encode("utf-8"))
        return digest.hexdigest()[:HASH_LENGTH]

    @staticmethod
    def _join_url(url_path: str, filename: str) -> str:
        return f"{url_path.rstrip('/')}/{filename}"

    def _save(self, image: Image.Image, output_path: Path, options: ResizeOptions) -> None:
        """Encode a variant next to its final path, then move it into place."""
        tmp = NamedTemporaryFile(
            dir=output_path.parent,
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = tmp.name
        tmp.close()

        try:
            self._encode(image, tmp_path, options)
            # Only complete files ever appear under the final name
            os.replace(tmp_path, output_path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def _encode(self, image: Image.Image, path: str, options: ResizeOptions) -> None:
        """Encode a variant in the configured lossy format."""
        if options.output_format is OutputFormat.JPEG:
            image = self._flatten(image)
            image.save(
                path,
                format=options.output_format.pil_format,
                quality=options.quality,
                optimize=True,
                progressive=True,
            )
        else:
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGBA")
            image.save(
                path,
                format=options.output_format.pil_format,
                quality=options.quality,
                method=6,
            )

    @staticmethod
    def _flatten(image: Image.Image) -> Image.Image:
        """Drop transparency onto a white background for formats without alpha."""
        if image.mode in ("RGB", "L"):
            return image
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background


class ImageResizerFactory:
    """Factory for creating resize primitives."""

    _resizers: Dict[str, Type[BaseImageResizer]] = {
        "pillow": PillowImageResizer,
    }

    @classmethod
    def create_resizer(cls, resizer_type: str = "pillow") -> BaseImageResizer:
        """
        Create resizer instance.

        Args:
            resizer_type: Type of resizer

        Returns:
            Resizer instance

        Raises:
            ValueError: If resizer type is not supported
        """
        if resizer_type not in cls._resizers:
            raise ValueError(f"Unsupported resizer type: {resizer_type}")

        return cls._resizers[resizer_type]()
