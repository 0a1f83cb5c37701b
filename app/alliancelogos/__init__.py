"""Track custom EVE Online alliance logos and publish them as a static page."""
from .version import __version__

__all__ = ["__version__"]
