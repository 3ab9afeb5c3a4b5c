from fastapi import APIRouter, Depends
from schemas.rule_models import RulesRequest, RulesResponse
from services.session import MapSession, get_session
from config import DEFAULT_COLOR

router = APIRouter()


@router.get('/rules', response_model=RulesResponse)
async def get_rules(session: MapSession = Depends(get_session)):
    return RulesResponse(rules=session.rules, default_color=DEFAULT_COLOR)


@router.put('/rules', response_model=RulesResponse)
async def set_rules(req: RulesRequest, session: MapSession = Depends(get_session)):
    """Reemplaza la lista de reglas y recolorea todas las regiones."""
    session.set_rules(req.rules)
    return RulesResponse(rules=session.rules, default_color=DEFAULT_COLOR)
