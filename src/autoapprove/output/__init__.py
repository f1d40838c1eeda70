"""Output reporters — Rich terminal and JSON."""
