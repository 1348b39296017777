"""Core interfaces and abstractions.

Contracts (Protocol) implemented by concrete adapters, so the core depends on
abstractions: the driver installer capability set and the host/remote
collaborators it composes.
"""
