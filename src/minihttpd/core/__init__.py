from .socket_server import SocketServer
from .connection import Connection

__all__ = [
    "SocketServer",     # Listening socket and sequential accept loop
    "Connection",       # One client socket as a byte channel
]
