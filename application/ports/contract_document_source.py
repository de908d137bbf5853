from typing import Protocol


class ContractDocumentSource(Protocol):
    """Where the bytes of a generated contract document live.

    Implementations raise ``NotFoundError`` when the contract or its document
    does not exist and ``StorageError`` when the fetch itself fails. ``None``
    or empty bytes mean the document exists but its content is unavailable.
    """

    async def fetch_bytes(self, contract_id: str) -> bytes | None: ...
