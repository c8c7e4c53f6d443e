"""
Space API endpoints.

Routes:
- POST /spaces - Create space
- GET /spaces - List the caller's spaces
- GET /spaces/{id} - Get space
- DELETE /spaces/{id} - Delete space and everything in it

Dependencies: spacerag.application.services, spacerag.models
System role: Space HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from spacerag.api.deps import get_current_user_id, get_space_service
from spacerag.application.services import SpaceService
from spacerag.models.common import ListResponse
from spacerag.models.space import SpaceCreateRequest, SpaceResponse

router = APIRouter(prefix="/spaces", tags=["spaces"])


@router.post("", response_model=SpaceResponse, status_code=status.HTTP_201_CREATED)
async def create_space(
    request: SpaceCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: SpaceService = Depends(get_space_service),
) -> SpaceResponse:
    space = await service.create_space(user_id, request.name, request.description)
    return SpaceResponse.model_validate(space)


@router.get("", response_model=ListResponse[SpaceResponse])
async def list_spaces(
    user_id: str = Depends(get_current_user_id),
    service: SpaceService = Depends(get_space_service),
) -> ListResponse[SpaceResponse]:
    spaces = await service.list_spaces(user_id)
    return ListResponse[SpaceResponse](
        items=[SpaceResponse.model_validate(space) for space in spaces],
        total=len(spaces),
    )


@router.get("/{space_id}", response_model=SpaceResponse)
async def get_space(
    space_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: SpaceService = Depends(get_space_service),
) -> SpaceResponse:
    return SpaceResponse.model_validate(await service.get_space(space_id, user_id))


@router.delete("/{space_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_space(
    space_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: SpaceService = Depends(get_space_service),
) -> Response:
    """
    Delete a space.

    Cascades to documents, chunks, conversations, messages and citations.
    """
    await service.delete_space(space_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
