from .health import HealthSerializer

__all__ = ["HealthSerializer"]
