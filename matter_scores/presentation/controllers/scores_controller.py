"""
Scores Router - Presentation Layer

This module defines the FastAPI router for the cached device scores: bulk
lookup, per-device-type rankings and cache rebuilds.
"""

from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from matter_scores.application.dtos.score_dto import (
    CachedScoresResponseDTO,
    RankedDeviceDTO,
    RankedDevicesResponseDTO,
    RebuildRequestDTO,
    RebuildResponseDTO,
)
from matter_scores.application.use_cases.score_cache_use_cases import (
    GetCachedScoresUseCase,
    GetDevicesRankedByScoreUseCase,
    RebuildScoreCacheUseCase,
)
from matter_scores.domain.ports.score_task_dispatcher import IScoreTaskDispatcher
from matter_scores.domain.services.specification_registry import SpecificationRegistry
from matter_scores.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/scores", tags=["Scores"])

MAX_LOOKUP_IDS = 500


@router.get("", response_model=CachedScoresResponseDTO)
@inject
async def get_cached_scores(
    device_ids: List[int] = Query(
        ..., description="Devices to look up (repeat the parameter for each id)"
    ),
    get_cached_scores_use_case: GetCachedScoresUseCase = Depends(
        Provide["get_cached_scores_use_case"]
    ),
) -> CachedScoresResponseDTO:
    """
    Get the cached scores of several devices at once.

    Devices without a cached entry are omitted. A storage failure answers
    with an empty mapping rather than an error.
    """
    if len(device_ids) > MAX_LOOKUP_IDS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"At most {MAX_LOOKUP_IDS} device ids per request",
        )

    scores = await get_cached_scores_use_case.execute(device_ids)
    logger.info("scores.lookup", requested=len(device_ids), found=len(scores))
    return CachedScoresResponseDTO.from_domain(scores)


@router.get("/ranked/{device_type_id}", response_model=RankedDevicesResponseDTO)
@inject
async def get_ranked_devices(
    device_type_id: int = Path(..., ge=0, description="Device-type id"),
    limit: int = Query(50, ge=1, le=500, description="Maximum rows to return"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    ranked_use_case: GetDevicesRankedByScoreUseCase = Depends(
        Provide["get_devices_ranked_use_case"]
    ),
    registry: SpecificationRegistry = Depends(Provide["specification_registry"]),
) -> RankedDevicesResponseDTO:
    """List devices implementing a device type, best overall score first."""
    try:
        ranked = await ranked_use_case.execute(
            device_type_id, limit=limit, offset=offset
        )
    except Exception as e:
        logger.error(
            "scores.ranking_failed",
            device_type_id=device_type_id,
            error=str(e),
            exc_info=e,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to rank devices: {str(e)}",
        )

    return RankedDevicesResponseDTO(
        device_type_id=device_type_id,
        device_type_name=registry.get_device_type_name(device_type_id),
        limit=limit,
        offset=offset,
        devices=[RankedDeviceDTO.from_domain(row, device_type_id) for row in ranked],
    )


@router.post(
    "/rebuild",
    response_model=RebuildResponseDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def rebuild_scores(
    request: RebuildRequestDTO,
    rebuild_use_case: RebuildScoreCacheUseCase = Depends(
        Provide["rebuild_score_cache_use_case"]
    ),
    dispatcher: IScoreTaskDispatcher = Depends(Provide["score_task_dispatcher"]),
) -> RebuildResponseDTO:
    """
    Rebuild the score cache for one device or for every device.

    With ``background`` set the rebuild is queued on the worker and the task
    id is returned; otherwise it runs inline and the processed count is
    returned.
    """
    logger.info(
        "scores.rebuild_requested",
        device_id=request.device_id,
        background=request.background,
    )
    try:
        if request.background:
            task_id = await dispatcher.dispatch_rebuild(request.device_id)
            return RebuildResponseDTO(task_id=task_id)

        processed = await rebuild_use_case.execute(request.device_id)
        return RebuildResponseDTO(processed=processed)

    except Exception as e:
        logger.error(
            "scores.rebuild_failed",
            device_id=request.device_id,
            error=str(e),
            exc_info=e,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to rebuild score cache: {str(e)}",
        )
