"""Conversational DeFi portfolio assistant: prices, wallet balances, and risk."""

__version__ = "0.1.0"
