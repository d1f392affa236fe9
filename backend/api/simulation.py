"""Portfolio simulation endpoint."""

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user, get_simulation_service
from models import User
from schemas import SimulationRequest, SimulationResult
from services.simulation_service import SimulationService

router = APIRouter(prefix="/api/simulation", tags=["simulation"])


@router.post("", response_model=SimulationResult)
def simulate(
    data: SimulationRequest,
    user: User = Depends(get_current_user),
    service: SimulationService = Depends(get_simulation_service),
):
    """Value a hypothetical portfolio at a past instant."""
    return service.simulate(data)
