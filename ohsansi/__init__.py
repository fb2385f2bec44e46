"""Panel administrativo de la olimpiada Oh! SanSí."""

__version__ = "0.1.0"
