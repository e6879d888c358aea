"""
Rendering Module
===============

Responsive image variant generation and markup assembly.

Components:
- image_resizer: Pillow-based resize primitive writing one file per width
- markup_generator: <picture> and srcset markup strategies
- renderer: Validates requests and ties the resizer and markup together
"""
