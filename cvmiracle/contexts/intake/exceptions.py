"""
Custom exceptions for the intake context.
"""


class InvalidJobOfferError(Exception):
    """Raised when a job offer has too little text to analyze."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Contenu d'offre insuffisant pour analyse ({length} characters, minimum {minimum})"
        )
