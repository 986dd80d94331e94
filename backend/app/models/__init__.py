from .hazards import Hazard

__all__ = [
    "Hazard",
]
