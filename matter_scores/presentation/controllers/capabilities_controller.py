"""
Capabilities Router - Presentation Layer

This module defines the FastAPI router for device capability analysis.
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Path, status

from matter_scores.application.dtos.capability_dto import CapabilityResultDTO
from matter_scores.application.use_cases.capability_use_cases import (
    AnalyzeDeviceCapabilitiesUseCase,
)
from matter_scores.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/devices", tags=["Capabilities"])


@router.get("/{device_id}/capabilities", response_model=CapabilityResultDTO)
@inject
async def get_device_capabilities(
    device_id: int = Path(..., ge=0, description="Device id"),
    analyze_use_case: AnalyzeDeviceCapabilitiesUseCase = Depends(
        Provide["analyze_capabilities_use_case"]
    ),
) -> CapabilityResultDTO:
    """
    Describe what a device can do in user-facing terms.

    Analyses the latest reported version of the device. A device without
    telemetry gets an empty analysis.
    """
    try:
        result = await analyze_use_case.execute(device_id)
    except Exception as e:
        logger.error(
            "capabilities.analysis_failed",
            device_id=device_id,
            error=str(e),
            exc_info=e,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to analyze device capabilities: {str(e)}",
        )

    return CapabilityResultDTO.from_domain(result, device_id=device_id)
