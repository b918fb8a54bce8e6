from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_contact_handler
from app.lib.contact import ContactHandler, ContactSubmission

router = APIRouter(prefix="/api", tags=["contact"])

@router.post("/contact")
async def contact(
    payload: Optional[ContactSubmission] = Body(default=None),
    handler: ContactHandler = Depends(get_contact_handler),
):
    outcome = await handler.handle(payload or ContactSubmission())
    status_code, body = outcome.response()
    return JSONResponse(body, status_code=status_code)
