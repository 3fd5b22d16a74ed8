"""Extraction of suggested tasks from reasoning-engine replies."""

from whatsnext.reply.parser import ParsingFailed, is_well_formed, parse_tasks

__all__ = ["ParsingFailed", "is_well_formed", "parse_tasks"]
