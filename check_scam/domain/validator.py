from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from ..config import ProviderConfig
from .models import ProviderOutcome

T = TypeVar("T")


class PhoneValidator(ABC, Generic[T]):
    """Abstract interface for remote phone validation providers."""

    name = "validator"

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    @abstractmethod
    def validate(self, phone: str) -> ProviderOutcome[T]:
        """Look up a canonical phone number. Must not raise."""
