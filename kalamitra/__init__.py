"""KalaMitra: photoshoots, listings and a buyer copilot for artisans."""

__version__ = "1.0.0"
