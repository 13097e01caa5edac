"""Difficulty recommendation with a building-capacity gate."""
