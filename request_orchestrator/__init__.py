"""
Request Orchestrator - Store middleware for declarative HTTP calls

Routes single-call, chain and concurrent API actions to HTTP requests and
dispatches the translated success/error actions back into the store.
"""

from .markers import (
    ApiMarker,
    CALL_API,
    CHAIN_API,
    CONCURRENT_API,
    action_with,
    call_action,
    chain_action,
    classify,
    concurrent_action,
)
from .descriptor import extract_params
from .executor import RequestExecutor
from .chain import run_chain
from .concurrent import run_concurrent
from .router import ApiMiddleware, create_api_middleware
from .store import Store, create_store, recording_reducer

__all__ = [
    "ApiMarker",
    "CALL_API",
    "CHAIN_API",
    "CONCURRENT_API",
    "action_with",
    "call_action",
    "chain_action",
    "classify",
    "concurrent_action",
    "extract_params",
    "RequestExecutor",
    "run_chain",
    "run_concurrent",
    "ApiMiddleware",
    "create_api_middleware",
    "Store",
    "create_store",
    "recording_reducer",
]
