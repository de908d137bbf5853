from enum import Enum


class BlobNamespace(str, Enum):
    """Logical partitions of the blob backend.

    The value doubles as the storage prefix, so objects in different
    namespaces can never share a key.
    """

    TEMPLATES = "contract-templates"
    GENERATED = "generated-contracts"

    @classmethod
    def from_container(cls, container: str | None) -> "BlobNamespace":
        """Resolve the upload form's ``container`` field.

        Only ``"generated"`` selects GENERATED; anything else is TEMPLATES.
        """
        if container == "generated":
            return cls.GENERATED
        return cls.TEMPLATES
