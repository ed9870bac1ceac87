# routes/admin.py
from fastapi import APIRouter, Depends

from database import get_db
from services import stats
from utils.auth import get_current_user_admin

router = APIRouter()


@router.get("/overview")
def get_overview(db=Depends(get_db), current_admin=Depends(get_current_user_admin)):
    return stats.overview(db)
