"""UI utilities (validators, id generation, etc.)."""

from .id_generator import generate_staff_id

__all__ = ["generate_staff_id"]
