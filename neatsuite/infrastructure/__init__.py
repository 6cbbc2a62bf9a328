"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the client to the outside world (HTTP transport, OAuth signing,
configuration files, logging, console) by implementing the interfaces
defined in the domain layer. Also includes the resilience utilities.
"""
