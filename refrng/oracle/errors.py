# oracle/errors.py
# Errors raised at the generator construction boundary.


class InvalidSeed(ValueError):
    """Seed material that would leave a generator in a degenerate state."""
