"""Croak Relay: forwards chat prompts to xAI and pins chat pairs to IPFS."""

__version__ = "1.0.0"
