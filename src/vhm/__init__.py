"""VHM: render NGINX virtual hosts into numbered config fragments."""

__version__ = "0.1.0"
