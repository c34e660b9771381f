from fastapi import APIRouter, Depends, Request

from catgallery.auth.dependencies import get_context, get_session_user, require_member
from catgallery.core.context import AppContext

router = APIRouter(tags=['pages'])

GALLERY_IMAGES = ['Cat1.jpg', 'Cat2.jpg', 'Cat3.jpg']


@router.get('/')
def home(
    request: Request,
    user: dict | None = Depends(get_session_user),
    context: AppContext = Depends(get_context),
):
    return context.templates.TemplateResponse(request, 'home.html', {'user': user})


@router.get('/members')
def members(
    request: Request,
    user: dict = Depends(require_member),
    context: AppContext = Depends(get_context),
):
    return context.templates.TemplateResponse(
        request,
        'members.html',
        {'name': user.get('name'), 'images': GALLERY_IMAGES},
    )
