"""
Code Execution Endpoint.

Runs a snippet of code in one of the supported languages and returns its
output. Compile errors, runtime errors and timeouts are reported in the
response body with a 200 status; only an unsupported language (400) or a
missing toolchain (503) fail the request.
"""

from typing import List

from fastapi import APIRouter

from scriptorium.core.logging_config import get_logger
from scriptorium.core.models.io.execution import ExecutionRead, ExecutionRequest
from scriptorium.execution.languages import supported_languages
from scriptorium.server.services.deps import RunnerDep

logger = get_logger(__name__)

router = APIRouter(tags=["execution"])


@router.post(
    "",
    response_model=ExecutionRead,
    summary="Execute Code",
    description="Compile if needed and run a snippet of code with optional standard input.",
    response_description="Execution status, captured output and timing.",
    responses={
        400: {"description": "Unsupported language"},
        422: {"description": "Empty code"},
        503: {"description": "Toolchain not available on the server"},
    },
)
async def execute_code(payload: ExecutionRequest, runner: RunnerDep) -> ExecutionRead:
    """
    Execute code.

    - **language**: python, javascript, java, c or cpp (aliases: py, js, node, c++).
    - **code**: Source code. Java code without a ``public class`` is wrapped in ``Main.main``.
    - **input**: Optional text for standard input.

    **status** is one of ``success``, ``runtime_error``, ``compile_error`` or ``timeout``.
    Output beyond the configured limit is dropped and **truncated** is set.
    """
    result = await runner.run(payload.language, payload.code, stdin=payload.input)
    return ExecutionRead(**result.to_dict())


@router.get(
    "/languages",
    response_model=List[str],
    summary="List Languages",
    description="Canonical names of the languages the execution endpoint accepts.",
)
async def list_languages() -> List[str]:
    """List supported languages."""
    return supported_languages()
