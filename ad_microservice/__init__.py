"""Read-only HTTP/JSON microservice over Active Directory users and computers."""

__version__ = "0.3.0"
