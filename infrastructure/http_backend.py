# ============================================================================
# HTTP WORKFLOW BACKEND
# ============================================================================
# STATUS: Infrastructure - Job API client
# PURPOSE: Job-fetch, batch upload, Stacks-fetch and lock commit over HTTP
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: HttpWorkflowBackend
# DEPENDENCIES: requests, pydantic, config, core.models, core.logic.grouping
# ============================================================================
"""
HTTP Workflow Backend.

Implements every backend interface against the job API:

    GET   {base}/api/jobs/{id}                   -> JobRecord
    POST  {base}/api/jobs/{id}/workflow/upload   -> UploadReceipt (multipart field 'files')
    GET   {base}/api/jobs/{id}/workflow/stacks   -> StackSnapshot
    PATCH {base}/api/jobs/{id}/workflow          -> commit (workflowLocked: true)

Error mapping:
    - Network errors, timeouts and 5xx   -> TransportError
    - 404 on Job-fetch                   -> ResourceNotFoundError
    - Other 4xx on commit                -> CommitRejectedError
    - Other 4xx elsewhere                -> TransportError
    - Unparseable payload                -> ContractViolationError

Usage:
    backend = HttpWorkflowBackend(get_config().backend)
    job = backend.get_job("job-123")
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from config import BackendConfig
from config.defaults import BackendDefaults
from core.errors import ErrorCode
from core.logic.grouping import classify_stack
from core.models import (
    Asset,
    CommitPayload,
    JobRecord,
    Panorama,
    RoomType,
    Stack,
    StackSnapshot,
    StackType,
    TourGraph,
    UploadFile,
    UploadReceipt
)
from exceptions import (
    CommitRejectedError,
    ConfigurationError,
    ContractViolationError,
    ResourceNotFoundError,
    TransportError
)
from util_logger import LoggerFactory, ComponentType
from .interface_repository import IAssetStorage, IJobRepository, IStackRepository, ParamNames as P


def _flag(value: Any) -> bool:
    # The API sends some booleans as "true"/"false" strings
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _style_letter(value: Optional[str]) -> Optional[str]:
    if value and value.lower().startswith("style"):
        return value[5:].upper() or None
    return value or None


class HttpWorkflowBackend(IJobRepository, IAssetStorage, IStackRepository):
    """
    requests-based client for the job API.
    """

    def __init__(self, config: BackendConfig, session: Optional[requests.Session] = None):
        if not config.base_url:
            raise ConfigurationError("WORKFLOW_API_BASE_URL must be set for the http backend")
        self.config = config
        self.base_url = config.base_url
        self.timeout = config.timeout_seconds
        self.session = session or requests.Session()
        if config.api_token:
            self.session.headers["Authorization"] = f"Bearer {config.api_token}"
        self.logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "HttpWorkflowBackend")

    # ========================================================================
    # TRANSPORT
    # ========================================================================

    def _url(self, job_id: str, suffix: str = "") -> str:
        return f"{self.base_url}{BackendDefaults.JOBS_PATH}/{job_id}{suffix}"

    def _request(self, method: str, url: str, operation: str, error_code: ErrorCode, **kwargs) -> requests.Response:
        """Issue one request; network failures and 5xx become TransportError."""
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            self.logger.warning(f"{operation} timed out after {self.timeout}s: {url}")
            raise TransportError(
                f"{operation} timed out", operation=operation, error_code=ErrorCode.TIMEOUT
            ) from e
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"{operation} failed: {e}")
            raise TransportError(
                f"{operation} failed: {e}", operation=operation, error_code=error_code
            ) from e

        if response.status_code >= 500:
            self.logger.warning(f"{operation} returned HTTP {response.status_code}")
            raise TransportError(
                f"{operation} failed with HTTP {response.status_code}",
                operation=operation,
                error_code=error_code,
                status_code=response.status_code
            )
        return response

    def _json(self, response: requests.Response, operation: str) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as e:
            raise ContractViolationError(f"{operation} returned a non-JSON body") from e

    # ========================================================================
    # IJobRepository
    # ========================================================================

    def get_job(self, job_id: str) -> JobRecord:
        response = self._request("GET", self._url(job_id), "get_job", ErrorCode.FETCH_FAILED)
        if response.status_code == 404:
            raise ResourceNotFoundError(f"Job '{job_id}' not found")
        if response.status_code >= 400:
            raise TransportError(
                f"get_job failed with HTTP {response.status_code}",
                operation="get_job",
                error_code=ErrorCode.FETCH_FAILED,
                status_code=response.status_code
            )
        return self.parse_job(job_id, self._json(response, "get_job"))

    def commit_job(self, job_id: str, payload: CommitPayload) -> bool:
        body = self.serialize_commit(payload)
        response = self._request(
            "PATCH", self._url(job_id, "/workflow"), "commit_job", ErrorCode.COMMIT_FAILED, json=body
        )
        if response.status_code >= 400:
            self.logger.warning(f"Commit rejected with HTTP {response.status_code}: {response.text[:500]}")
            raise CommitRejectedError(
                f"Commit rejected with HTTP {response.status_code}",
                operation="commit_job",
                error_code=ErrorCode.COMMIT_REJECTED,
                status_code=response.status_code
            )
        return True

    # ========================================================================
    # IAssetStorage
    # ========================================================================

    def upload_batch(self, job_id: str, files: List[UploadFile]) -> UploadReceipt:
        multipart = [
            (P.FILES, (upload.name, upload.content, upload.resolved_media_type))
            for upload in files
        ]
        response = self._request(
            "POST", self._url(job_id, "/workflow/upload"), "upload_batch", ErrorCode.UPLOAD_FAILED,
            files=multipart
        )
        if response.status_code >= 400:
            raise TransportError(
                f"upload_batch failed with HTTP {response.status_code}",
                operation="upload_batch",
                error_code=ErrorCode.UPLOAD_FAILED,
                status_code=response.status_code
            )
        data = self._json(response, "upload_batch")
        return UploadReceipt(uploaded_count=int(data.get(P.UPLOADED_COUNT, len(files))))

    # ========================================================================
    # IStackRepository
    # ========================================================================

    def list_stacks(self, job_id: str) -> StackSnapshot:
        response = self._request(
            "GET", self._url(job_id, "/workflow/stacks"), "list_stacks", ErrorCode.FETCH_FAILED
        )
        if response.status_code >= 400:
            raise TransportError(
                f"list_stacks failed with HTTP {response.status_code}",
                operation="list_stacks",
                error_code=ErrorCode.FETCH_FAILED,
                status_code=response.status_code
            )
        return self.parse_snapshot(self._json(response, "list_stacks"))

    # ========================================================================
    # WIRE -> MODEL
    # ========================================================================

    @staticmethod
    def parse_asset(data: Dict[str, Any]) -> Asset:
        kind = data.get("type")
        media_type = data.get("mimeType") or ("video/mp4" if kind == "video" else "image/jpeg")
        captured = data.get("capturedAt") or data.get("createdAt")
        return Asset(
            asset_id=str(data["id"]),
            name=data.get("originalFilename") or str(data["id"]),
            size=int(data.get("fileSize") or 0),
            media_type=media_type,
            url=data.get("thumbnailUrl"),
            captured_at=datetime.fromisoformat(captured.replace("Z", "+00:00")) if captured else None,
            width=data.get("width") or None,
            height=data.get("height") or None,
            is_360=kind == "360",
        )

    def _server_room_type(self, value: Any, stack_id: Any) -> Optional[RoomType]:
        # Server stacks start as "unassigned" and older jobs carry labels
        # outside the closed vocabulary; both count as not yet annotated
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return RoomType(value.strip())
        except ValueError:
            if value.strip().lower() != BackendDefaults.UNASSIGNED_ROOM_TYPE:
                self.logger.warning(
                    f"Server stack {stack_id} has unknown room type '{value}', treating as unassigned",
                    extra={'custom_dimensions': {'stack_id': str(stack_id), 'room_type': value}}
                )
            return None

    def parse_snapshot(self, data: Dict[str, Any]) -> StackSnapshot:
        try:
            stacks = []
            for raw in data.get(P.STACKS) or []:
                assets = [self.parse_asset(image) for image in raw.get("images") or []]
                if not assets:
                    self.logger.warning(f"Skipping server stack {raw.get('id')} without images")
                    continue
                frame_count = raw.get(P.FRAME_COUNT)
                if frame_count == 3:
                    stack_type = StackType.BRACKET3
                elif frame_count == 5:
                    stack_type = StackType.BRACKET5
                else:
                    stack_type = classify_stack(assets)
                stacks.append(Stack(
                    stack_id=str(raw["id"]),
                    assets=assets,
                    room_type=self._server_room_type(raw.get(P.ROOM_TYPE), raw.get("id")),
                    stack_type=stack_type,
                    comment=raw.get(P.COMMENT) or None,
                ))
            unsorted = [self.parse_asset(image) for image in data.get(P.UNSORTED_IMAGES) or []]
        except (KeyError, TypeError, ValueError, PydanticValidationError) as e:
            raise ContractViolationError(f"Unparseable stacks payload: {e}") from e
        return StackSnapshot(stacks=stacks, unsorted_assets=unsorted)

    @staticmethod
    def parse_tour(data: Optional[Dict[str, Any]]) -> Optional[TourGraph]:
        if not data:
            return None
        panoramas = [
            Panorama(
                panorama_id=str(raw["id"]),
                asset_id=str(raw["fileId"]),
                name=raw.get("name", ""),
                category=raw.get("category") or Panorama.model_fields["category"].default,
                floor=raw.get("floor") or Panorama.model_fields["floor"].default,
                connections=set(raw.get("connections") or []),
            )
            for raw in data.get(P.PANORAMAS) or []
        ]
        return TourGraph(
            panoramas=panoramas,
            start_panorama_id=data.get(P.START_PANORAMA),
            floorplan_asset_id=data.get(P.FLOORPLAN),
        )

    def parse_job(self, job_id: str, data: Dict[str, Any]) -> JobRecord:
        try:
            appointment = data.get(P.APPOINTMENT_DATE)
            fields = dict(
                job_id=str(data.get(P.JOB_ID) or job_id),
                job_number=data.get(P.JOB_NUMBER),
                address=data.get(P.PROPERTY_ADDRESS) or data.get(P.ADDRESS_FORMATTED),
                date=datetime.fromisoformat(appointment.replace("Z", "+00:00")) if appointment else None,
                customer=data.get(P.CUSTOMER_NAME),
                locked=_flag(data.get(P.WORKFLOW_LOCKED)),
                current_step=data.get(P.WORKFLOW_STEP) or 1,
                retouch_profile={
                    k: _flag(v) for k, v in (data.get(P.RETOUCH_PROFILE) or {}).items()
                    if k != "additionalNotes"
                },
                notes=data.get(P.CUSTOMER_COMMENT) or "",
                deliver_alt_texts=_flag(data.get(P.DELIVER_ALTTEXT)),
                deliver_captions=_flag(data.get(P.DELIVER_EXPOSE)),
                bracket_size=data.get(P.BRACKET_SIZE),
                tour=self.parse_tour(data.get(P.TOUR_360)),
            )
            for key, wire_key in (
                ("editing_style", P.EDITING_STYLE),
                ("window_style", P.WINDOW_STYLE),
                ("sky_style", P.SKY_STYLE),
            ):
                value = data.get(wire_key)
                if key == "editing_style":
                    value = _style_letter(value)
                if value:
                    fields[key] = value
            return JobRecord(**fields)
        except (TypeError, ValueError, PydanticValidationError) as e:
            raise ContractViolationError(f"Unparseable job payload for '{job_id}': {e}") from e

    # ========================================================================
    # MODEL -> WIRE
    # ========================================================================

    @staticmethod
    def serialize_commit(payload: CommitPayload) -> Dict[str, Any]:
        directives = payload.directives
        tour = None
        if payload.tour is not None:
            tour = {
                P.PANORAMAS: [
                    {
                        "id": p.panorama_id,
                        "fileId": p.asset_id,
                        "name": p.name,
                        "category": p.category.value,
                        "floor": p.floor.value,
                        "connections": sorted(p.connections),
                    }
                    for p in payload.tour.panoramas
                ],
                P.FLOORPLAN: payload.tour.floorplan_asset_id,
                P.START_PANORAMA: payload.tour.start_panorama_id,
            }
        return {
            P.EDITING_STYLE: directives.editing_style.value,
            P.WINDOW_STYLE: directives.window_style.value,
            P.SKY_STYLE: directives.sky_style.value,
            P.RETOUCH_PROFILE: directives.retouch_profile(),
            P.CUSTOMER_COMMENT: directives.notes,
            P.DELIVER_ALTTEXT: "true" if directives.deliver_alt_texts else "false",
            P.DELIVER_EXPOSE: "true" if directives.deliver_captions else "false",
            P.TOUR_360: tour,
            P.STACK_ANNOTATIONS: [
                {
                    "stackId": a.stack_id,
                    P.ROOM_TYPE: a.room_type.value,
                    P.COMMENT: a.comment,
                    P.IMAGE_IDS: list(a.asset_ids),
                    P.FRAME_COUNT: len(a.asset_ids),
                }
                for a in payload.stack_annotations
            ],
            P.WORKFLOW_LOCKED: payload.locked,
        }
