"""relaybot - relays generative-model replies to Telegram with native formatting."""

__version__ = "0.1.0"
