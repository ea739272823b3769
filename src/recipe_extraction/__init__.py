"""Recipe extraction service.

Turns web pages, social posts and recipe-card photos into structured
recipes through a multi-strategy acquisition and resilient parsing
pipeline.
"""

__version__ = "0.1.0"
