from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from catgallery.auth import users
from catgallery.auth.dependencies import get_context, get_db, require_admin, require_admin_page
from catgallery.core.context import AppContext
from catgallery.models.user import Role

router = APIRouter(tags=['admin'])


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    role: str

    class Config:
        from_attributes = True


@router.get('/admin')
def admin_panel(
    request: Request,
    admin: dict = Depends(require_admin_page),
    context: AppContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    user_summaries = [UserSummary.model_validate(user) for user in users.list_users(db)]
    return context.templates.TemplateResponse(
        request,
        'admin.html',
        {'users': user_summaries, 'admin': admin},
    )


@router.get('/promote/{user_id}', dependencies=[Depends(require_admin)])
def promote_user(user_id: int, db: Session = Depends(get_db)):
    users.set_role(db, user_id, Role.ADMIN)
    return RedirectResponse(url='/admin', status_code=status.HTTP_302_FOUND)


@router.get('/demote/{user_id}', dependencies=[Depends(require_admin)])
def demote_user(user_id: int, db: Session = Depends(get_db)):
    users.set_role(db, user_id, Role.USER)
    return RedirectResponse(url='/admin', status_code=status.HTTP_302_FOUND)
