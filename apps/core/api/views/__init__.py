from .health import HealthView

__all__ = ["HealthView"]
