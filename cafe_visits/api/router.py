from fastapi import APIRouter
from typing import Dict, List
from ..database.session import ContextDep
from ..utils.services import get_average_visits
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/average")
def get_average_cafe_visits(context: ContextDep) -> Dict[str, List[str]]:
    """Average visits per cafe as parallel arrays; empty object if the query failed"""
    result = get_average_visits(context.visit_table)
    if not result:
        logger.warning("Average visits query returned no result")
    return result
