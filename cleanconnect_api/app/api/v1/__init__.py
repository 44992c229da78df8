"""Version 1 of the CleanConnect API."""
