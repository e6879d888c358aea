"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Build-time settings for image output and markup
- logging: Structured logging configuration
"""
