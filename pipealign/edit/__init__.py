"""A text editor which displays tables aligned."""
