"""
Instagram Grid Maker
Resize an image, slice it into posting-order tiles and bundle them as a ZIP
"""

__version__ = "1.0.0"
