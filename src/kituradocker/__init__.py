"""
kituradocker - Build, tag and publish the Kitura Swift docker images
"""

__version__ = "0.1.0"

from .core import ImagePublisher
from .errors import KituraDockerError

__all__ = ["ImagePublisher", "KituraDockerError"]
