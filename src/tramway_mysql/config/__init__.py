"""Configuration: named parameters and service descriptors."""

from .parameters import get_parameters
from .services import SERVICES, build_service

__all__ = [
    "get_parameters",
    "SERVICES",
    "build_service",
]
