"""Domain Interfaces (Ports):

Defines the contracts (Abstract Base Classes and Protocols) that
infrastructure components implement. The client facade depends on these
contracts, not on concrete implementations.
"""
