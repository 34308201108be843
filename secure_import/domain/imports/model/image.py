from secure_import.domain.shared.model.value import ValueObject


class LocalImage(ValueObject):
    """An image held by the local container daemon, ready to be pushed."""

    name: str  # e.g., docker.io/bitnami/redis:7.2.4
    image_id: str | None = None  # e.g., sha256:0f3e...
