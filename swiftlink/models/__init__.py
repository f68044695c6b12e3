# Make `from swiftlink.models import User, Message` work
from .orm import User, Message  # re-export

__all__ = ["User", "Message"]
