"""Device location tracker: device registry API and signal-quality map client."""

__version__ = "0.1.0"
