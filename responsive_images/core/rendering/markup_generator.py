"""
Markup Generator
================

Assemble HTML for a set of responsive image variants.
Two interchangeable strategies share one interface: a breakpoint based
``<picture>`` element and a single ``<img>`` with ``srcset``/``sizes``.
"""

from typing import Dict, List, Optional, Sequence, Type, Union
from abc import ABC, abstractmethod

from responsive_images.config.logging import get_logger
from responsive_images.models.schemas import ImageRequest, ImageVariant, MarkupPolicy

logger = get_logger(__name__)

DEFAULT_SIZES_OFFSET = 10
LINK_CLASS = "img-ref"
LINK_REL = "noopener"


class MarkupGenerationError(Exception):
    """Exception raised when markup cannot be assembled from the variants."""

    pass


class BaseMarkupGenerator(ABC):
    """Abstract base class for markup strategies."""

    policy: MarkupPolicy

    def generate(self, request: ImageRequest, variants: Sequence[ImageVariant]) -> str:
        """
        Generate markup for the variants of one request.

        Args:
            request: Validated image request
            variants: Variants in request order

        Returns:
            HTML fragment, wrapped in an anchor when the request has a link URL

        Raises:
            MarkupGenerationError: If there are no variants
        """
        if not variants:
            raise MarkupGenerationError(f"No variants to render for {request.source_path}")

        html = self._render_image(request, list(variants))
        if request.link_url:
            html = self._wrap_in_link(html, request)
        return html

    @abstractmethod
    def _render_image(self, request: ImageRequest, variants: List[ImageVariant]) -> str:
        """Render the image element(s) without the link wrapper."""
        pass

    def _wrap_in_link(self, html: str, request: ImageRequest) -> str:
        attrs_str = self._build_attributes(
            {
                "href": request.link_url,
                "class": LINK_CLASS,
                "target": request.link_target,
                "rel": LINK_REL,
            }
        )
        return f"<a{attrs_str}>\n{html}\n</a>"

    def _build_attributes(self, attributes: Dict[str, Optional[str]]) -> str:
        """Build HTML attributes string, skipping attributes set to None."""
        attr_pairs: List[str] = []
        for key, value in attributes.items():
            if value is not None:
                attr_pairs.append(f'{key}="{self._escape_html(str(value))}"')

        return " " + " ".join(attr_pairs) if attr_pairs else ""

    def _escape_html(self, text: str) -> str:
        """Escape HTML special characters."""
        if not text:
            return ""
        return (
            text.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&#x27;")
        )


class PictureMarkupGenerator(BaseMarkupGenerator):
    """Breakpoint policy: one ``<source>`` per width inside ``<picture>``."""

    policy = MarkupPolicy.PICTURE

    def _render_image(self, request: ImageRequest, variants: List[ImageVariant]) -> str:
        lines: List[str] = []

        for variant in variants[:-1]:
            lines.append(self._render_source(variant, f"(max-width: {variant.width}px)"))

        # Catch-all for viewports wider than every listed breakpoint
        last = variants[-1]
        lines.append(self._render_source(last, f"(min-width: {last.width}px)"))

        img_attrs = self._build_attributes({"alt": request.alt_text, "src": variants[0].url})
        lines.append(f"  <img{img_attrs}>")

        picture_attrs = self._build_attributes({"class": request.css_classes or None})
        return "\n".join([f"<picture{picture_attrs}>", *lines, "</picture>"])

    def _render_source(self, variant: ImageVariant, media: str) -> str:
        attrs_str = self._build_attributes({"srcset": variant.url, "media": media})
        return f"  <source{attrs_str}>"


class SrcsetMarkupGenerator(BaseMarkupGenerator):
    """Width descriptor policy: a single ``<img>`` with ``srcset`` and ``sizes``."""

    policy = MarkupPolicy.SRCSET

    def __init__(self, sizes_offset: int = DEFAULT_SIZES_OFFSET) -> None:
        if sizes_offset < 0:
            raise ValueError(f"sizes_offset must not be negative: {sizes_offset}")
        self.sizes_offset = sizes_offset

    def _render_image(self, request: ImageRequest, variants: List[ImageVariant]) -> str:
        attrs_str = self._build_attributes(
            {
                "class": request.css_classes or None,
                "alt": request.alt_text,
                "src": variants[0].url,
                "srcset": self.build_srcset(variants),
                "sizes": self.build_sizes(variants),
            }
        )
        return f"<img{attrs_str}>"

    def build_srcset(self, variants: Sequence[ImageVariant]) -> str:
        return ", ".join(f"{variant.url} {variant.width}w" for variant in variants)

    def build_sizes(self, variants: Sequence[ImageVariant]) -> str:
        """Per-width viewport hints; the last width is the unconditional default."""
        hints = [
            f"(max-width: {variant.width + self.sizes_offset}px) {variant.width}px"
            for variant in variants[:-1]
        ]
        hints.append(f"{variants[-1].width}px")
        return ", ".join(hints)


class MarkupGeneratorFactory:
    """Factory for creating markup strategies."""

    _generators: Dict[MarkupPolicy, Type[BaseMarkupGenerator]] = {
        MarkupPolicy.PICTURE: PictureMarkupGenerator,
        MarkupPolicy.SRCSET: SrcsetMarkupGenerator,
    }

    @classmethod
    def create_generator(
        cls,
        policy: Union[MarkupPolicy, str] = MarkupPolicy.PICTURE,
        sizes_offset: int = DEFAULT_SIZES_OFFSET,
    ) -> BaseMarkupGenerator:
        """
        Create markup generator instance.

        Args:
            policy: Markup policy name
            sizes_offset: Breakpoint offset for the srcset policy

        Returns:
            Markup generator instance

        Raises:
            ValueError: If the policy is not supported
        """
        try:
            policy = MarkupPolicy(policy)
        except ValueError:
            raise ValueError(f"Unsupported markup policy: {policy}") from None

        logger.debug("Creating markup generator", policy=policy.value)
        generator_cls = cls._generators[policy]
        if generator_cls is SrcsetMarkupGenerator:
            return SrcsetMarkupGenerator(sizes_offset=sizes_offset)
        return generator_cls()
