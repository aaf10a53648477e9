"""Medical report summarization service: PDF/image in, structured summary out."""

__version__ = "0.1.0"
