import enum


class UserRole(str, enum.Enum):
    PRODUCER = "Productor"
    CONTRACTOR = "Contratista"
    BOTH = "Ambos"


class ServiceType(str, enum.Enum):
    SIEMBRA = "siembra"
    COSECHA = "cosecha"
    FUMIGACION = "fumigacion"
    PULVERIZACION = "pulverizacion"
    FERTILIZACION = "fertilizacion"
    ARADO = "arado"
    RASTRA = "rastra"
    OTROS = "otros"


class ServiceStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    ARCHIVED = "archived"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CLOSED = "closed"


class FeedKind(str, enum.Enum):
    SERVICES = "services"
    REQUESTS = "requests"


class FeedScope(str, enum.Enum):
    ALL = "all"
    OWN = "own"
    NONE = "none"


SERVICE_TYPE_LABELS: dict[str, str] = {
    ServiceType.SIEMBRA.value: "Siembra",
    ServiceType.COSECHA.value: "Cosecha",
    ServiceType.FUMIGACION.value: "Fumigación",
    ServiceType.PULVERIZACION.value: "Pulverización",
    ServiceType.FERTILIZACION.value: "Fertilización",
    ServiceType.ARADO.value: "Arado",
    ServiceType.RASTRA.value: "Rastra",
    ServiceType.OTROS.value: "Otros",
}


def service_type_label(value: str) -> str:
    return SERVICE_TYPE_LABELS.get(value, value)
