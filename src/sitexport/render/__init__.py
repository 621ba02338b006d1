"""Markup generation — style resolution, expressions, links and emitters."""
