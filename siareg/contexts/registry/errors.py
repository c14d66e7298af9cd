"""
Base exceptions for the register.

Transport, dispatch and parse errors build on RegisterError in
siareg.contexts.scraping.errors.
"""


class RegisterError(Exception):
    pass


class EmptyQueryError(RegisterError, ValueError):
    pass
