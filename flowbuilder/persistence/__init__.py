"""
flowbuilder/persistence - Payload models for the persistence service.

Usage:
    from flowbuilder.persistence import FlowRecord, ClientEntry, is_publishable
"""

from .schema import (
    ClientEntry,
    FlowRecord,
    build_flow_record,
    is_publishable,
)

__all__ = [
    "ClientEntry",
    "FlowRecord",
    "build_flow_record",
    "is_publishable",
]
