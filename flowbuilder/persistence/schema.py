"""
Pydantic models for the payloads exchanged with the persistence service.

The engine never talks to the service itself; these models describe what a
caller sends and receives so both directions are validated at the seam.

Usage:
    from flowbuilder.persistence.schema import FlowRecord, build_flow_record

    record = build_flow_record("Onboarding", client_id="c_1", screens=screens)
    payload = record.model_dump(by_alias=True, exclude_none=True)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from flowbuilder.config.engine_config import EngineConfig
from flowbuilder.engine.compiler import compile_flow
from flowbuilder.engine.types import Screen, screens_to_builder_state


# =============================================================================
# Flow Records
# =============================================================================


class FlowRecord(BaseModel):
    """A persisted flow: the external document plus the editor's own state."""
    model_config = {"populate_by_name": True}

    id: Optional[str] = Field(None, description="Record id, absent until first save")
    name: str = Field(description="Human-readable flow name")
    data: Dict[str, Any] = Field(default_factory=dict, description="External flow document")
    builder_state: Optional[List[Dict[str, Any]]] = Field(
        None, description="Internal screen graph as saved by the editor"
    )
    client_id: Optional[str] = Field(None, alias="clientId", description="Owning client")
    is_active: bool = Field(True, description="Whether the flow is live")


# =============================================================================
# Clients
# =============================================================================


class ClientEntry(BaseModel):
    """A client a flow may be published under."""
    model_config = {"populate_by_name": True}

    id: str = Field(description="Client id")
    name: str = Field(description="Client display name")
    has_access_token: bool = Field(
        False, alias="hasAccessToken", description="Client holds a publishing token"
    )


def build_flow_record(
    name: str,
    client_id: Optional[str],
    screens: Sequence[Screen],
    record_id: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> FlowRecord:
    """Build the record to save: compiled document plus builder state."""
    return FlowRecord(
        id=record_id,
        name=name,
        data=compile_flow(screens, config),
        builder_state=screens_to_builder_state(tuple(screens)),
        client_id=client_id,
    )


def is_publishable(client_id: Optional[str], clients: Iterable[ClientEntry]) -> bool:
    """A flow can be published only for a known client with an access token."""
    if not client_id:
        return False
    return any(c.id == client_id and c.has_access_token for c in clients)
