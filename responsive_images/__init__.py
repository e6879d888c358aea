"""
Responsive Images
=================

Responsive image generation for a static blog build.

This package provides:
- Resized raster variants of a source image, one per requested width
- Breakpoint (<picture>) and srcset markup assembled from those variants
- An async Jinja2 shortcode so templates can request responsive images
- Environment-based configuration and structured logging
"""

__version__ = "1.0.0"
__author__ = "Manish Katoch"
