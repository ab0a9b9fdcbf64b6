"""Synchronize local Postman collections with the Postman API."""

__version__ = "0.1.0"
