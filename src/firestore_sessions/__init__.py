"""Session store HTTP persistido no Firestore."""

__version__ = "0.1.0"
