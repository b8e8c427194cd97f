"""Mirror a GitHub project's issues into a local cache and report on them."""

__version__ = "0.1.0"
