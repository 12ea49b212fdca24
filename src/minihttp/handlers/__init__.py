from .basic import home, echo, user_agent
from .files import FileHandler

__all__ = [
    "home",
    "echo",
    "user_agent",
    "FileHandler",
]
