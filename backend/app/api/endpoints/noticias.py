"""
Noticias API endpoints

CRUD operations for noticias. Listings return the page's records and carry
the total match count in the X-Total-Count header.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...constants import TOTAL_COUNT_HEADER
from ...domain.noticias import (
    NoticiaCreate,
    NoticiaUpdate,
    NoticiaRead,
    PaginationQuery,
)
from ...services.noticias import NoticiasService
from ..dependencies import get_noticias_service

router = APIRouter(prefix="/noticias", tags=["noticias"])


def get_pagination_query(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    search: Optional[str] = Query(None, description="Search in titulo and descricao"),
) -> PaginationQuery:
    return PaginationQuery(page=page, limit=limit, search=search)


@router.post("", response_model=NoticiaRead, status_code=status.HTTP_201_CREATED)
async def create_noticia(
    noticia_data: NoticiaCreate,
    service: NoticiasService = Depends(get_noticias_service),
):
    """
    Create a new noticia.

    Args:
        noticia_data: Noticia creation data
        service: Noticias service

    Returns:
        Created noticia
    """
    noticia = await service.create(noticia_data)
    return NoticiaRead.model_validate(noticia)


@router.get("", response_model=List[NoticiaRead])
async def list_noticias(
    response: Response,
    query: PaginationQuery = Depends(get_pagination_query),
    service: NoticiasService = Depends(get_noticias_service),
):
    """
    List noticias, newest first, with pagination and optional search.

    The total number of matching noticias is returned in X-Total-Count.
    """
    result = await service.find_all(query)
    response.headers[TOTAL_COUNT_HEADER] = str(result.total)
    return result.data


@router.get("/{noticia_id}", response_model=NoticiaRead)
async def get_noticia(
    noticia_id: int,
    service: NoticiasService = Depends(get_noticias_service),
):
    """Get noticia by ID."""
    noticia = await service.find_one(noticia_id)
    return NoticiaRead.model_validate(noticia)


@router.patch("/{noticia_id}", response_model=NoticiaRead)
async def update_noticia(
    noticia_id: int,
    update_data: NoticiaUpdate,
    service: NoticiasService = Depends(get_noticias_service),
):
    """
    Update noticia.

    Args:
        noticia_id: Noticia ID
        update_data: Fields to change
        service: Noticias service

    Returns:
        Updated noticia
    """
    noticia = await service.update(noticia_id, update_data)
    return NoticiaRead.model_validate(noticia)


@router.delete("/{noticia_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_noticia(
    noticia_id: int,
    service: NoticiasService = Depends(get_noticias_service),
):
    """Delete noticia."""
    await service.remove(noticia_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
