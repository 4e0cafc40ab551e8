"""Release train automation: version propagation, staging and deployment."""

__version__ = "0.1.0"
