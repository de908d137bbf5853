from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from application.ports.repositories.generated_contract_repository import (
    GeneratedContractRecord,
    GeneratedContractRepository,
)
from domain.exceptions import StorageError
from infrastructure.config import Settings


class MongoGeneratedContractRepository(GeneratedContractRepository):
    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.contracts = self.db[settings.mongo_contracts_collection]

    async def get_by_id(self, contract_id: str) -> GeneratedContractRecord | None:
        try:
            doc = await self.contracts.find_one(
                {"$or": [{"contract_id": contract_id}, {"_id": contract_id}]},
            )
        except PyMongoError as e:
            msg = f"Contract lookup failed: {e!s}"
            raise StorageError(msg) from e

        if not doc:
            return None
        # Records written by the generation workflow use camelCase filePath
        return GeneratedContractRecord(
            contract_id=str(doc.get("contract_id") or doc.get("_id")),
            file_path=doc.get("file_path") or doc.get("filePath"),
        )
