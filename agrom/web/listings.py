from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse

from agrom.api.deps import get_listing_service, get_policy, get_storage
from agrom.common.exceptions import AgromException, PermissionDeniedError
from agrom.core.access.policy import ViewerPolicy
from agrom.core.listings.schemas import RequestForm, ServiceForm
from agrom.core.listings.service import ListingService, describe_request, describe_service
from agrom.integrations.storage import StorageClient, UploadedImage
from agrom.web.templating import templates

router = APIRouter()


async def _read_images(files: list[UploadFile] | None) -> list[UploadedImage]:
    images = []
    for f in files or []:
        if not f.filename:
            continue
        images.append(
            UploadedImage(
                filename=f.filename,
                content=await f.read(),
                content_type=f.content_type or "application/octet-stream",
            )
        )
    return images


# ---------- Services ----------


@router.get("/services/new", response_class=HTMLResponse)
async def new_service_page(request: Request, policy: ViewerPolicy = Depends(get_policy)):
    if not policy.can_create_service:
        raise PermissionDeniedError("Solo los Contratistas pueden crear servicios")
    return templates.TemplateResponse(request, "services/new.html", {"form": ServiceForm()})


@router.post("/services/new")
async def handle_new_service(
    request: Request,
    service_type: str = Form("siembra"),
    title: str = Form(""),
    description: str = Form(""),
    coverage_area: str = Form(""),
    reference_price: str = Form(""),
    video_url: str = Form(""),
    images: list[UploadFile] | None = File(None),
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
    storage: StorageClient = Depends(get_storage),
):
    form = ServiceForm(
        service_type=service_type,
        title=title,
        description=description,
        coverage_area=coverage_area,
        reference_price=reference_price,
        video_url=video_url,
    )
    try:
        service = await listings.create_service(policy, form, await _read_images(images), storage)
    except AgromException as e:
        return templates.TemplateResponse(
            request, "services/new.html", {"form": form, "error": e.detail}, status_code=e.status_code,
        )
    return RedirectResponse(url=f"/services/{service.id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/services/{service_id}", response_class=HTMLResponse)
async def service_page(
    request: Request,
    service_id: str,
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    service = await listings.get_service(service_id, policy)
    return templates.TemplateResponse(
        request, "services/detail.html", {"detail": describe_service(service, policy)},
    )


# ---------- Requests ----------


async def _render_request_form(
    request: Request,
    policy: ViewerPolicy,
    listings: ListingService,
    form: RequestForm,
    error: str | None = None,
    status_code: int = 200,
):
    lots = await listings.list_lots(policy.viewer_id)
    return templates.TemplateResponse(
        request, "requests/new.html", {"form": form, "lots": lots, "error": error}, status_code=status_code,
    )


@router.get("/requests/new", response_class=HTMLResponse)
async def new_request_page(
    request: Request,
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    if not policy.can_create_request:
        raise PermissionDeniedError("Solo los Productores pueden crear solicitudes")
    return await _render_request_form(request, policy, listings, RequestForm())


@router.post("/requests/new")
async def handle_new_request(
    request: Request,
    service_type: str = Form("siembra"),
    hectares: str = Form(""),
    date_target: str = Form(""),
    location: str = Form(""),
    lot_id: str = Form(""),
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    form = RequestForm(
        service_type=service_type,
        hectares=hectares,
        date_target=date_target,
        location=location,
        lot_id=lot_id or None,
    )
    try:
        created = await listings.create_request(policy, form)
    except AgromException as e:
        return await _render_request_form(
            request, policy, listings, form, error=e.detail, status_code=e.status_code,
        )
    return RedirectResponse(url=f"/requests/{created.id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/requests/{request_id}", response_class=HTMLResponse)
async def request_page(
    request: Request,
    request_id: str,
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    work_request = await listings.get_request(request_id, policy)
    return templates.TemplateResponse(
        request, "requests/detail.html", {"detail": describe_request(work_request, policy)},
    )
