"""Session layer - the controller owning one project's pipeline state."""

from .controller import SessionController

__all__ = ["SessionController"]
