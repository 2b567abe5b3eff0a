from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.responses import JSONResponse

from ...deps import get_db_session
from ....db import check_database_health
from ....models.catalog import OPTION_KINDS
from ....models.options import option_model

router = APIRouter(tags=["ops"])


@router.get("/health")
def health(session: Session = Depends(get_db_session)) -> JSONResponse:
    # Count rows of the first kind to prove the ORM mapping reaches a real table
    probe = option_model(OPTION_KINDS[0])
    try:
        session.execute(select(func.count()).select_from(probe)).scalar()
        orm_ok = True
    except SQLAlchemyError as exc:
        orm_ok = False
        orm_details = str(exc)
    else:
        orm_details = "ok"

    db = check_database_health()
    overall_ok = db["ok"] and orm_ok
    status_code = 200 if overall_ok else 503
    return JSONResponse(
        {
            "status": "ok" if overall_ok else "degraded",
            "db": db,
            "orm": {"ok": orm_ok, "details": orm_details, "table": probe.__tablename__},
            "kinds": len(OPTION_KINDS),
        },
        status_code=status_code,
    )
