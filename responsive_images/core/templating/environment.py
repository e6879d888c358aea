"""
Template Environment
====================

Jinja2 environment for site templates with the responsive image shortcode.

Templates call the shortcode once per image::

    {{ rI("images/cover.jpg", "A cover photo", [480, 768, 1200], "hero") }}

The shortcode is async, so pages must be rendered with ``render_async``.
"""

from typing import Any, Iterable, Optional, Sequence, Union
from pathlib import Path

import jinja2
from markupsafe import Markup

from responsive_images.config.logging import get_logger
from responsive_images.core.rendering.renderer import (
    ResponsiveImageError,
    ResponsiveImageRenderer,
)
from responsive_images.models.schemas import MISSING

logger = get_logger(__name__)

DEFAULT_SHORTCODE_NAME = "rI"
DEFAULT_SEARCH_PATHS = ("_includes", ".")


class TemplateRenderError(Exception):
    """Exception raised when a page template fails to render."""

    pass


def create_environment(
    search_paths: Iterable[Union[str, Path]] = DEFAULT_SEARCH_PATHS,
    renderer: Optional[ResponsiveImageRenderer] = None,
    shortcode_name: str = DEFAULT_SHORTCODE_NAME,
) -> jinja2.Environment:
    """
    Create the Jinja2 environment used for site pages.

    Args:
        search_paths: Template directories, includes first
        renderer: Responsive image renderer; built from settings when omitted
        shortcode_name: Template name of the image shortcode

    Returns:
        Async-enabled environment with the shortcode registered
    """
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader([str(path) for path in search_paths]),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        enable_async=True,
    )
    register_image_shortcode(env, renderer or ResponsiveImageRenderer(), shortcode_name)
    return env


def register_image_shortcode(
    env: jinja2.Environment,
    renderer: ResponsiveImageRenderer,
    name: str = DEFAULT_SHORTCODE_NAME,
) -> None:
    """Expose ``renderer.render`` to templates as an async global."""
    if not env.is_async:
        raise ValueError("The responsive image shortcode requires enable_async=True")

    async def responsive_image(
        src: str,
        alt: Any = MISSING,
        widths: Sequence[int] = (),
        classes: str = "",
        url: str = "",
        target: Optional[str] = None,
    ) -> Markup:
        if isinstance(alt, jinja2.Undefined):
            alt = MISSING
        html = await renderer.render(src, alt, widths, classes, url, target)
        return Markup(html)

    env.globals[name] = responsive_image
    logger.debug("Registered responsive image shortcode", name=name)


async def render_template(env: jinja2.Environment, template_name: str, **context: Any) -> str:
    """
    Render a page template asynchronously.

    Args:
        env: Environment from ``create_environment``
        template_name: Template path relative to the search paths
        **context: Template variables

    Returns:
        Rendered page

    Raises:
        ResponsiveImageError: If an image directive on the page failed
        TemplateRenderError: If the template itself could not be rendered
    """
    try:
        template = env.get_template(template_name)
        html = await template.render_async(**context)
        logger.info("Template rendered", template=template_name, html_length=len(html))
        return html
    except ResponsiveImageError as e:
        logger.error(
            "Image directive failed", template=template_name, source=e.source_path, error=str(e)
        )
        raise
    except jinja2.TemplateError as e:
        logger.error("Template rendering failed", template=template_name, error=str(e))
        raise TemplateRenderError(f"Template rendering failed: {template_name}: {e}") from e
