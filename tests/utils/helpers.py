"""
Test Helpers
============

Helper functions for creating source images and inspecting markup.
"""

import re
from pathlib import Path
from typing import List, Tuple

from PIL import Image


def create_test_image(
    path: Path,
    size: Tuple[int, int] = (1600, 900),
    mode: str = "RGB",
    image_format: str = "JPEG",
) -> Path:
    """Write a solid-colour image to ``path`` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    color = (200, 120, 40, 128) if mode == "RGBA" else (200, 120, 40)
    Image.new(mode, size, color).save(path, format=image_format)
    return path


def find_tags(html: str, tag: str) -> List[str]:
    """Return every opening ``<tag ...>`` in the markup."""
    return re.findall(rf"<{tag}\b[^>]*>", html)


def get_attribute(tag_html: str, name: str) -> str:
    """Return the value of attribute ``name`` in a single tag."""
    match = re.search(rf'\s{name}="([^"]*)"', tag_html)
    if match is None:
        raise AssertionError(f"Attribute {name!r} not found in {tag_html!r}")
    return match.group(1)


def has_attribute(tag_html: str, name: str) -> bool:
    return re.search(rf'\s{name}="', tag_html) is not None


def image_size(path: Path) -> Tuple[int, int]:
    with Image.open(path) as image:
        return image.size
