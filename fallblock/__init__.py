"""Fallblock: a falling-block puzzle engine with a pygame front end."""
