"""
This module defines custom exceptions for the reservation parser.
"""


class ParsingError(Exception):
    """Custom exception for errors during calendar file parsing."""

    pass
