"""expressgen -- an Express.js API project and resource generator."""

__version__ = "1.0.0"
