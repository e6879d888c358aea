"""
Core Logic
==========

Image resizing, markup assembly and template-engine integration.

Modules:
- rendering: Resize primitive, markup strategies and the responsive image renderer
- templating: Jinja2 environment and shortcode registration
"""
