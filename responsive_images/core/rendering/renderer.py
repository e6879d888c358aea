"""
Responsive Image Renderer
=========================

Turn one image directive into resized variants plus the markup that lets a
browser pick between them.

Validation happens before any resize work so a rejected directive never
leaves partial files behind. Failures are fatal for the directive and are
raised to the caller; there are no retries.
"""

from typing import Any, List, Optional, Sequence, Union
from pathlib import Path

from responsive_images.config.logging import get_logger
from responsive_images.config.settings import Settings, get_settings
from responsive_images.core.rendering.image_resizer import (
    BaseImageResizer,
    ImageResizerFactory,
)
from responsive_images.core.rendering.markup_generator import (
    BaseMarkupGenerator,
    MarkupGeneratorFactory,
)
from responsive_images.models.schemas import (
    MISSING,
    ImageRequest,
    ImageVariant,
    ResizeOptions,
)

logger = get_logger(__name__)


class ResponsiveImageError(Exception):
    """Base class for failures of a single image directive."""

    def __init__(self, message: str, source_path: Union[str, Path]) -> None:
        super().__init__(message)
        self.source_path = str(source_path)


class MissingAltText(ResponsiveImageError):
    """Raised when a directive does not supply alt text at all."""

    def __init__(self, source_path: Union[str, Path]) -> None:
        super().__init__(f"Missing `alt` on responsive image from: {source_path}", source_path)


class InvalidWidthList(ResponsiveImageError):
    """Raised when the requested widths are empty or malformed."""

    def __init__(self, source_path: Union[str, Path], widths: Any) -> None:
        super().__init__(
            f"Invalid width list {widths!r} on responsive image from: {source_path}",
            source_path,
        )
        self.widths = widths


class ImageProcessingFailed(ResponsiveImageError):
    """Raised when the source image could not be resized or written."""

    def __init__(self, source_path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Image processing failed for {source_path}: {reason}", source_path)
        self.reason = reason


class ResponsiveImageRenderer:
    """Validate a directive, request its variants and assemble markup."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resizer: Optional[BaseImageResizer] = None,
        markup_generator: Optional[BaseMarkupGenerator] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.resizer = resizer or ImageResizerFactory.create_resizer()
        self.markup_generator = markup_generator or MarkupGeneratorFactory.create_generator(
            self.settings.markup_policy, sizes_offset=self.settings.sizes_offset
        )
        self.logger: Any = logger.bind(  # structlog.BoundLoggerBase
            renderer="responsive_image", policy=self.markup_generator.policy.value
        )

    @property
    def resize_options(self) -> ResizeOptions:
        return ResizeOptions(
            output_format=self.settings.output_format,
            output_dir=self.settings.output_dir,
            url_path=self.settings.url_path,
            quality=self.settings.quality,
            overwrite_existing=self.settings.overwrite_existing,
        )

    async def render(
        self,
        source_path: Union[str, Path],
        alt_text: Any = MISSING,
        target_widths: Sequence[int] = (),
        css_classes: str = "",
        link_url: str = "",
        link_target: Optional[str] = None,
    ) -> str:
        """
        Render one responsive image directive.

        Args:
            source_path: Path of the source raster
            alt_text: Alternative text; ``""`` is valid, ``MISSING`` is not
            target_widths: Widths to generate, in the order they should appear
            css_classes: Classes for the outer image element
            link_url: Wrap the image in an anchor to this URL when non-empty
            link_target: Anchor target, defaults to the configured target

        Returns:
            HTML fragment referencing one variant per requested width

        Raises:
            MissingAltText: If alt text was not supplied
            InvalidWidthList: If the width list is empty or malformed
            ImageProcessingFailed: If resizing or writing the variants failed
        """
        request = self.build_request(
            source_path, alt_text, target_widths, css_classes, link_url, link_target
        )

        self.logger.info(
            "Rendering responsive image",
            source=request.source_path,
            widths=request.target_widths,
        )

        variants = await self._resize(request)
        html = self.markup_generator.generate(request, variants)

        self.logger.info(
            "Responsive image rendered",
            source=request.source_path,
            variants=len(variants),
            html_length=len(html),
        )
        return html

    def build_request(
        self,
        source_path: Union[str, Path],
        alt_text: Any = MISSING,
        target_widths: Sequence[int] = (),
        css_classes: str = "",
        link_url: str = "",
        link_target: Optional[str] = None,
    ) -> ImageRequest:
        """Validate directive arguments into an ImageRequest."""
        source = str(source_path) if source_path is not None else ""

        if alt_text is MISSING or alt_text is None:
            self.logger.error("Responsive image rejected", source=source, reason="missing alt")
            raise MissingAltText(source)

        widths = self._validate_widths(source, target_widths)

        if not source:
            raise ImageProcessingFailed(source, "source path is empty")

        return ImageRequest(
            source_path=source,
            alt_text=str(alt_text),
            target_widths=widths,
            css_classes=self._text(css_classes),
            link_url=self._text(link_url),
            link_target=self._text(link_target) or self.settings.default_link_target,
        )

    @staticmethod
    def _text(value: Any) -> str:
        """Template values arrive untyped; ``None`` means not given."""
        return "" if value is None else str(value)

    def _validate_widths(self, source: str, target_widths: Any) -> List[int]:
        if isinstance(target_widths, (str, bytes)):
            raise InvalidWidthList(source, target_widths)
        try:
            widths = list(target_widths)
        except TypeError:
            raise InvalidWidthList(source, target_widths) from None

        valid = bool(widths) and all(
            isinstance(w, int) and not isinstance(w, bool) and w > 0 for w in widths
        )
        if not valid:
            self.logger.error(
                "Responsive image rejected", source=source, reason="invalid widths", widths=widths
            )
            raise InvalidWidthList(source, target_widths)
        return widths

    async def _resize(self, request: ImageRequest) -> List[ImageVariant]:
        try:
            variants = await self.resizer.resize(
                request.source_path, request.target_widths, self.resize_options
            )
        except Exception as e:
            self.logger.error(
                "Responsive image processing failed", source=request.source_path, error=str(e)
            )
            raise ImageProcessingFailed(request.source_path, str(e)) from e

        returned = [variant.width for variant in variants]
        if returned != request.target_widths:
            raise ImageProcessingFailed(
                request.source_path,
                f"resizer returned widths {returned}, expected {request.target_widths}",
            )
        return variants


async def render_responsive_image(
    source_path: Union[str, Path],
    alt_text: Any = MISSING,
    target_widths: Sequence[int] = (),
    css_classes: str = "",
    link_url: str = "",
    link_target: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Render a responsive image with a renderer built from settings.

    Args:
        source_path: Path of the source raster
        alt_text: Alternative text; ``""`` is valid, ``MISSING`` is not
        target_widths: Widths to generate
        css_classes: Classes for the outer image element
        link_url: Optional anchor URL
        link_target: Optional anchor target
        settings: Settings to use instead of the global ones

    Returns:
        HTML fragment
    """
    renderer = ResponsiveImageRenderer(settings)
    return await renderer.render(
        source_path, alt_text, target_widths, css_classes, link_url, link_target
    )
