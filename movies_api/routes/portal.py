"""Public key issuance portal."""

from fastapi import APIRouter, Depends, status

from movies_api.dependencies import get_api_key_repository
from movies_api.logging.config import get_logger
from movies_api.repositories.api_key_repository import ApiKeyRepository
from movies_api.schemas.api_key import IssueKeyRequest, IssueKeyResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/portal", tags=["Portal"])

KEY_STORAGE_NOTE = "Store this key safely. If you lose it, create a new one."


@router.post(
    "/keys",
    response_model=IssueKeyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue an API key",
    responses={
        201: {
            "description": "API key issued",
            "content": {
                "application/json": {
                    "example": {
                        "apiKey": "kapi_Qm9vZ2llV29vZ2llQm9vZ2ll",
                        "note": KEY_STORAGE_NOTE,
                        "docs": "/docs",
                    }
                }
            },
        },
        400: {"description": "name or email missing"},
    },
)
async def issue_key(
    body: IssueKeyRequest,
    repo: ApiKeyRepository = Depends(get_api_key_repository),
) -> IssueKeyResponse:
    """
    Issue a new API key. Open to anyone; the key is shown only once.

    Args:
        body: Holder name and email
        repo: Key store

    Returns:
        IssueKeyResponse with the plaintext key
    """
    api_key = await repo.issue(body.name, body.email)
    logger.info("API key issued", extra={"context": {"holder": body.name}})

    return IssueKeyResponse(api_key=api_key, note=KEY_STORAGE_NOTE, docs="/docs")
