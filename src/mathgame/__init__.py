"""Addition quiz game with Rich console and Textual front-ends."""
