"""
Enums for the animation streaming server
"""

from enum import Enum, auto


class ClientKind(Enum):
    """
    How a requesting client is served

    BROWSER: gets a static instruction page
    TERMINAL: gets the live frame stream
    """
    BROWSER = auto()
    TERMINAL = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    SYSTEM = auto()      # Startup, shutdown, errors
    API = auto()         # HTTP requests and responses
    STORE = auto()       # Animation cache hits, misses, parse results
    STREAM = auto()      # Streaming sessions (start, finish, disconnect)
    ASSETS = auto()      # Asset directory enumeration and file reads

    SHUTDOWN = auto()
    LIFECYCLE = auto()
    TASK = auto()

    GENERAL = auto()    # Default general category
