"""Calorie Vita nutrition tracking backend."""
