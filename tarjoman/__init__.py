"""
Tarjoman - an LLM-powered translation client with local history.

Translations go to Gemini; API keys, settings, history and languages the
model discovers along the way are stored locally.
"""

__version__ = "0.1.0"
