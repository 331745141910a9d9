"""PlaySpend: Google Play purchase history analyzer."""

__version__ = "0.1.0"
