from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.image import ImageResponse
from app.core.database import get_db
from app.services.image import ImageService
from app.utils.roles import get_current_user, is_admin

router = APIRouter(prefix="/image", tags=["Image"])


@router.get("/", response_model=List[ImageResponse], status_code=status.HTTP_200_OK)
async def get_images(
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Получение списка всех загруженных изображений (администраторы).

    Сами файлы отдаются статикой по адресу /static/<image>.
    """
    is_admin(current_user)
    images = await ImageService.get_all_images(db)
    return [ImageResponse.model_validate(image) for image in images]


@router.get("/{image_id}", response_model=ImageResponse, status_code=status.HTTP_200_OK)
async def get_image(
        image_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    image = await ImageService.get_image(image_id, db)
    return ImageResponse.model_validate(image)


@router.delete("/delete/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
        image_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Удаление изображения и его файла (администраторы).

    Raises:
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Изображение не найдено
    """
    is_admin(current_user)
    await ImageService.delete_image(image_id, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
