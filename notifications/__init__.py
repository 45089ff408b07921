from .webhook import send_message, post_detached

__all__ = ["send_message", "post_detached"]
