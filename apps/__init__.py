"""Django apps of the hotel reservation project."""
