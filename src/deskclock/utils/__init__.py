import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

from deskclock.utils.logging_handler import setup_logger
from deskclock.utils.event import Event
