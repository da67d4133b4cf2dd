"""
compiler.py - Compile the internal screen list into the external document.

The forward direction is the "best effort, structurally defensive" one: it
runs continuously for live preview while the user edits, so it is
stateless, deterministic and never raises. Per-screen work is delegated to
the assembler and per-element work to the formatter.

Usage:
    from flowbuilder.engine.compiler import compile_flow

    document = compile_flow(screens)
    document["version"]  # "7.3"
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from flowbuilder.config.engine_config import EngineConfig, get_engine_config

from .assembler import assemble_screen
from .types import Screen

logger = logging.getLogger(__name__)


def compile_flow(
    screens: Iterable[Screen],
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """Map internal screens to the external `{version, screens}` document.

    Args:
        screens: Internal screens in flow order.
        config: Engine config; defaults to the cached engine config.

    Returns:
        A freshly built document dict. Elements with static visibility
        False are absent from it.
    """
    config = config or get_engine_config()
    compiled = [assemble_screen(screen, config) for screen in screens]
    logger.debug("Compiled %d screen(s) to document version %s", len(compiled), config.document_version)
    return {
        "version": config.document_version,
        "screens": compiled,
    }
