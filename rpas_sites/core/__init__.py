"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Limits, styles, layers, population categories
- exceptions: Exception taxonomy
"""
