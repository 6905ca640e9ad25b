"""
SKYFLAP - side-scrolling arcade flyer.

Tap to flap, fly through the gaps, survive as long as you can.
"""

__version__ = "0.1.0"
