from .relocation import RelocationScenario, prepare
from .verify import ExpectedResults, Mismatch, VerificationReport

__all__ = [
    "RelocationScenario",
    "prepare",
    "ExpectedResults",
    "Mismatch",
    "VerificationReport",
]
