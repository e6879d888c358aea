"""
Data Models
===========

Pydantic models for image requests, generated variants and options.
"""
