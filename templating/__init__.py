"""
Template rendering for task titles and notes.

Usage:
    from templating import render

    title = render("${title}?${doi}: (${doi})?", {"title": "Paper", "doi": ""})
"""

from .engine import find_tokens, is_defined, render

__all__ = ["render", "is_defined", "find_tokens"]
