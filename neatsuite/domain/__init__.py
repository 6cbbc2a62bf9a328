"""Domain Layer: types and contracts of the NetSuite client.

Holds the value objects, request/response models, the typed error and the
abstract interfaces (ports) that infrastructure adapters implement.
"""
