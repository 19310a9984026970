from agrom.common.enums import FeedKind, RequestStatus, ServiceStatus, UserRole
from agrom.common.exceptions import NotFoundError, PermissionDeniedError
from agrom.common.logging import get_logger
from agrom.config import settings
from agrom.core.access.policy import ViewerPolicy, rating_criteria
from agrom.core.contact.links import REQUEST_MESSAGE, SERVICE_MESSAGE, build_contact_link
from agrom.core.listings.feed import (
    FeedQuery,
    filter_requests,
    filter_services,
    request_scope_filters,
    service_scope_filters,
)
from agrom.core.listings.schemas import (
    Lot,
    RequestDetail,
    RequestForm,
    Service,
    ServiceDetail,
    ServiceForm,
    WorkRequest,
)
from agrom.core.listings.validation import validate_request_form, validate_service_form
from agrom.core.reputation.aggregator import stored_reputation
from agrom.integrations.storage import StorageClient, UploadedImage
from agrom.integrations.supabase import SupabaseClient

logger = get_logger("listings.service")

_OWNER_COLUMNS = "id, name, role, base_location, phone, reputation_avg, reputation_count"
SERVICE_COLUMNS = f"*, contractor:contractor_id({_OWNER_COLUMNS})"
REQUEST_COLUMNS = (
    f"*, producer:producer_id({_OWNER_COLUMNS}), "
    "lot:lot_id(id, owner_id, name, location, surface_total_ha)"
)


def describe_service(service: Service, policy: ViewerPolicy) -> ServiceDetail:
    contractor = service.contractor
    contact_link = None
    if contractor is not None:
        contact_link = build_contact_link(
            contractor.phone, SERVICE_MESSAGE, base_url=settings.CONTACT_LINK_BASE_URL,
            name=contractor.display_name, title=service.title,
        )
    return ServiceDetail(
        service=service,
        contact_link=contact_link,
        # the owner of a service is rated as a contractor
        can_rate=policy.can_rate(UserRole.CONTRACTOR, service.contractor_id),
        rating_criteria=rating_criteria(UserRole.CONTRACTOR),
        is_owner=service.contractor_id == policy.viewer_id,
        owner_reputation=stored_reputation(contractor) if contractor is not None else None,
    )


def describe_request(request: WorkRequest, policy: ViewerPolicy) -> RequestDetail:
    producer = request.producer
    contact_link = None
    if producer is not None:
        contact_link = build_contact_link(
            producer.phone, REQUEST_MESSAGE, base_url=settings.CONTACT_LINK_BASE_URL,
            name=producer.display_name, service_type=request.service_type,
        )
    return RequestDetail(
        request=request,
        contact_link=contact_link,
        can_rate=policy.can_rate(UserRole.PRODUCER, request.producer_id),
        rating_criteria=rating_criteria(UserRole.PRODUCER),
        is_owner=request.producer_id == policy.viewer_id,
        owner_reputation=stored_reputation(producer) if producer is not None else None,
    )


class ListingService:
    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    # ---------- Feeds ----------

    async def list_services(self, policy: ViewerPolicy, query: FeedQuery) -> list[Service]:
        filters = service_scope_filters(policy.scope_for(FeedKind.SERVICES), policy.viewer_id)
        if filters is None:
            return []
        rows = await self.backend.select("services", columns=SERVICE_COLUMNS, filters=filters)
        services = [Service.model_validate(row) for row in rows]
        return services if query.is_identity else filter_services(services, query)

    async def list_requests(self, policy: ViewerPolicy, query: FeedQuery) -> list[WorkRequest]:
        filters = request_scope_filters(policy.scope_for(FeedKind.REQUESTS), policy.viewer_id)
        if filters is None:
            return []
        rows = await self.backend.select("requests", columns=REQUEST_COLUMNS, filters=filters)
        requests = [WorkRequest.model_validate(row) for row in rows]
        return requests if query.is_identity else filter_requests(requests, query)

    async def list_lots(self, owner_id: str) -> list[Lot]:
        rows = await self.backend.select("lots", filters={"owner_id": owner_id})
        return [Lot.model_validate(row) for row in rows]

    # ---------- Detail ----------

    async def get_service(self, service_id: str, policy: ViewerPolicy) -> Service:
        row = await self.backend.select_one("services", columns=SERVICE_COLUMNS, filters={"id": service_id})
        if row is None:
            raise NotFoundError("Servicio", service_id)
        service = Service.model_validate(row)
        if service.status != ServiceStatus.ACTIVE.value and service.contractor_id != policy.viewer_id:
            raise NotFoundError("Servicio", service_id)
        return service

    async def get_request(self, request_id: str, policy: ViewerPolicy) -> WorkRequest:
        row = await self.backend.select_one("requests", columns=REQUEST_COLUMNS, filters={"id": request_id})
        if row is None:
            raise NotFoundError("Solicitud", request_id)
        request = WorkRequest.model_validate(row)
        if request.status != RequestStatus.PENDING.value and request.producer_id != policy.viewer_id:
            raise NotFoundError("Solicitud", request_id)
        return request

    # ---------- Publishing ----------

    async def create_service(
        self,
        policy: ViewerPolicy,
        form: ServiceForm,
        images: list[UploadedImage] | None = None,
        storage: StorageClient | None = None,
    ) -> Service:
        if not policy.can_create_service:
            raise PermissionDeniedError("Solo los Contratistas pueden crear servicios")
        values = validate_service_form(form)

        image_urls: list[str] = []
        if images and storage is not None:
            image_urls = await storage.upload_images(images)

        created = await self.backend.insert(
            "services",
            {
                **values,
                "contractor_id": policy.viewer_id,
                "images": image_urls,
                "status": ServiceStatus.ACTIVE.value,
            },
        )
        logger.info("Service published by %s (%d images)", policy.viewer_id, len(image_urls))
        return Service.model_validate(created)

    async def create_request(self, policy: ViewerPolicy, form: RequestForm) -> WorkRequest:
        if not policy.can_create_request:
            raise PermissionDeniedError("Solo los Productores pueden crear solicitudes")
        values = validate_request_form(form)

        created = await self.backend.insert(
            "requests",
            {**values, "producer_id": policy.viewer_id, "status": RequestStatus.PENDING.value},
        )
        logger.info("Request published by %s (%.1f ha)", policy.viewer_id, values["hectares"])
        return WorkRequest.model_validate(created)
