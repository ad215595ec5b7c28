"""Python SDK for the Neuro-sama game API."""
from importlib.metadata import version, PackageNotFoundError

from .client import NeuroClient
from .config import Action, ClientSettings
from .protocol import ActionData, ForcePriority
from .utils import LogLevel

try:
    __version__ = version("neuro-game-sdk")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "Action",
    "ActionData",
    "ClientSettings",
    "ForcePriority",
    "LogLevel",
    "NeuroClient",
]
