"""Aqara smart-home control exposed as Model Context Protocol tools."""

from .aqara_api import AqaraAPI
from .config import AqaraConfig
from .constants import SERVER_VERSION as __version__

__all__ = ["AqaraAPI", "AqaraConfig", "__version__"]
