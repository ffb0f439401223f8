"""Print text files with their tables aligned."""
