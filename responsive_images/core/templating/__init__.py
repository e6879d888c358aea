"""
Templating Module
=================

Jinja2 environment setup and the async responsive image shortcode.
"""
