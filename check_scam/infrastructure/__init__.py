from .gemini import GeminiOracle
from .numverify import NumverifyValidator
from .veriphone import VeriphoneValidator

__all__ = [
    "GeminiOracle",
    "NumverifyValidator",
    "VeriphoneValidator",
]
