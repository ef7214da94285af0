# This project was developed with assistance from AI tools.
"""Request, response and value schemas."""
