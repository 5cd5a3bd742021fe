"""GenRelay: HTTP relay from prompts and uploaded media to a generative API."""

__version__ = "0.1.0"
