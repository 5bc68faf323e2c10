"""Booking assistant endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.assistant import SlotRequest, SlotResponse, TeamSlotRequest, TeamSlotResponse
from ...services.scheduling import service as scheduling_service

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/slots", response_model=SlotResponse, status_code=status.HTTP_200_OK)
def slots(payload: SlotRequest) -> SlotResponse:
    try:
        return scheduling_service.find_slots(payload)
    except scheduling_service.InvalidBookingRequest as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error searching booking slots: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to search booking slots: {str(exc)}"
        ) from exc


@router.post("/team-slots", response_model=TeamSlotResponse, status_code=status.HTTP_200_OK)
def team_slots(payload: TeamSlotRequest) -> TeamSlotResponse:
    try:
        return scheduling_service.find_team_slots(payload)
    except scheduling_service.InvalidBookingRequest as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error searching team slots: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to search team slots: {str(exc)}"
        ) from exc
