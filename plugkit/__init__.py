"""Chat-bot plugin building blocks: a Wordle game, fun-test lookups and a galgame picture archive."""

__version__ = "0.1.0"
__all__ = ["wordle", "wtf", "ymgal_db", "ymgal_scraper"]