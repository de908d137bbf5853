from abc import ABC, abstractmethod

from pydantic import BaseModel


class GeneratedContractRecord(BaseModel):
    """Persisted pointer from a contract id to its provider document."""

    contract_id: str
    file_path: str | None = None

    @property
    def document_token(self) -> str | None:
        """Return the provider document token, without a ``feishu://`` scheme."""
        if not self.file_path:
            return None
        return self.file_path.removeprefix("feishu://") or None


class GeneratedContractRepository(ABC):
    @abstractmethod
    async def get_by_id(self, contract_id: str) -> GeneratedContractRecord | None:
        pass
