"""Camera projection models, camera rigs and synchronized multi-camera frames."""

__version__ = "0.1.0"
__author__ = "Nagarjunan"

from . import utils
from . import calibration
from . import cameras
from . import frames
