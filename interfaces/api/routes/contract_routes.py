from collections.abc import Container
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from application.use_cases.contract_document_use_cases import GetContractDocumentUseCase
from domain.value_objects.contract_document import ContractDocument
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import get_container

router = APIRouter(prefix="/api/feishu/contracts", tags=["contracts"])


def _document_response(document: ContractDocument) -> Response:
    return Response(
        content=document.data,
        media_type=document.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"',
            "Content-Length": str(document.size_bytes),
        },
    )


@router.get(
    "/{contract_id}/download",
    status_code=status.HTTP_200_OK,
    response_class=Response,
)
@handle_use_case_errors
async def download_contract(
    contract_id: str,
    container: Annotated[Container, Depends(get_container)],
) -> Response:
    """Download a contract document generated by Feishu.

    Returns:
        200 OK: Raw ``.docx`` bytes as an attachment
        404 Not Found: No document for this contract
        500 Internal Server Error: Document found but unreadable, or fetch failed

    """
    use_case = container[GetContractDocumentUseCase]
    result = await use_case.execute(contract_id)
    return result.map(_document_response)
