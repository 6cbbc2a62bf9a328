"""Core Layer: the client facade, its middleware chain and command handling."""
