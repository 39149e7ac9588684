"""Reference MT19937-64 and xoshiro256** generators with an HTTP oracle."""
