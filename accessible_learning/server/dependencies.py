"""FastAPI dependency providers for the store and the transcription client.

WHY: Routes must not reach for module-level singletons (a shared API key,
a shared store). create_app() puts the store and a client factory on
``app.state``; these providers hand them to routes, and tests swap them
by building an app with their own instances.

RULES:
- The client factory is called once per request that needs it
- A missing API key surfaces as HTTP 500 with the config error message
"""

from __future__ import annotations

from typing import Annotated, Callable

from fastapi import Depends, HTTPException, Request

from accessible_learning.api.client import AssemblyAIClient
from accessible_learning.storage import JSONStore

ClientFactory = Callable[[], AssemblyAIClient]


def get_store(request: Request) -> JSONStore:
    return request.app.state.store


def get_transcription_client(request: Request) -> AssemblyAIClient:
    factory: ClientFactory = request.app.state.client_factory
    try:
        return factory()
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc))


StoreDep = Annotated[JSONStore, Depends(get_store)]
ClientDep = Annotated[AssemblyAIClient, Depends(get_transcription_client)]
