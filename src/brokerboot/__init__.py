"""BROKERBOOT

One-shot provisioning for containerised message-broker instances.
It discovers the container's own network address, reads a declarative list of
messaging destinations, creates the broker instance with the derived startup
arguments and then hands the process over to the broker.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
