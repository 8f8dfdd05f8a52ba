import os
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logger import logger
from app.models import Image


def get_static_dir() -> Path:
    static_dir = Path(settings.STATIC_DIR).resolve()
    static_dir.mkdir(parents=True, exist_ok=True)
    return static_dir


REMOVED_FILES = "removed_image_files"
WRITTEN_FILES = "written_image_files"


def schedule_file_removal(session, path: Path) -> None:
    """Файл удаляется с диска только после успешного коммита сессии."""
    session.info.setdefault(REMOVED_FILES, []).append(path)


def track_written_file(session, path: Path) -> None:
    """Записанный файл удаляется с диска, если транзакция будет откачена."""
    session.info.setdefault(WRITTEN_FILES, []).append(path)


@event.listens_for(Session, "after_commit")
def _apply_file_changes(session):
    session.info.pop(WRITTEN_FILES, None)
    for path in session.info.pop(REMOVED_FILES, []):
        path.unlink(missing_ok=True)
        logger.debug(f"[УДАЛЕНИЕ ИЗОБРАЖЕНИЯ] Файл удалён: {path.name}")


@event.listens_for(Session, "after_rollback")
def _discard_file_changes(session):
    session.info.pop(REMOVED_FILES, None)
    for path in session.info.pop(WRITTEN_FILES, []):
        path.unlink(missing_ok=True)
        logger.debug(f"[ЗАГРУЗКА ИЗОБРАЖЕНИЯ] Файл откачен: {path.name}")


class ImageService:
    @staticmethod
    async def create(files: List[UploadFile], db: AsyncSession) -> List[Image]:
        """
        Сохранение загруженных изображений на диск и в базу данных.

        Файлы пишутся в STATIC_DIR под уникальным именем, для каждого создаётся
        запись Image. Коммит выполняет вызывающий сервис.

        Args:
            files: Загруженные файлы (multipart)
            db: Асинхронная сессия SQLAlchemy

        Returns:
            List[Image]: Созданные записи изображений

        Raises:
            HTTPException: 400 - Файл не является изображением или слишком большой
        """
        images = []
        written = []
        static_dir = get_static_dir()

        try:
            for file in files:
                if not file or not file.filename:
                    continue

                if not (file.content_type or "").startswith("image/"):
                    logger.warning(f"[ЗАГРУЗКА ИЗОБРАЖЕНИЯ] Неверный тип файла: {file.content_type}")
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Only image files are allowed"
                    )

                content = await file.read()
                if len(content) > settings.MAX_IMAGE_SIZE:
                    logger.warning(f"[ЗАГРУЗКА ИЗОБРАЖЕНИЯ] Файл слишком большой: {len(content)} байт")
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Image is too large"
                    )

                extension = os.path.splitext(file.filename)[1].lower()
                file_name = f"{uuid4()}{extension}"
                path = static_dir / file_name
                path.write_bytes(content)
                written.append(path)
                track_written_file(db, path)

                image = Image(image=file_name)
                db.add(image)
                images.append(image)

            await db.flush()
            logger.info(f"[ЗАГРУЗКА ИЗОБРАЖЕНИЯ] Сохранено изображений: {len(images)}")
            return images

        except (HTTPException, SQLAlchemyError):
            for path in written:
                path.unlink(missing_ok=True)
            raise

    @staticmethod
    async def remove(image_id: str, db: AsyncSession) -> Optional[Image]:
        """
        Удаление изображения: записи в базе данных и файла на диске.

        Файл удаляется после коммита, который выполняет вызывающий сервис.
        Отсутствующий на диске файл не считается ошибкой.
        """
        image = await db.get(Image, image_id)
        if not image:
            logger.warning(f"[УДАЛЕНИЕ ИЗОБРАЖЕНИЯ] Изображение не найдено: ID {image_id}")
            return None

        await db.delete(image)
        await db.flush()
        schedule_file_removal(db, get_static_dir() / image.image)

        logger.info(f"[УДАЛЕНИЕ ИЗОБРАЖЕНИЯ] Изображение удалено: ID {image_id}")
        return image

    @staticmethod
    async def get_all_images(db: AsyncSession) -> List[Image]:
        try:
            result = await db.execute(select(Image))
            images = result.scalars().all()
            logger.info(f"[ПОЛУЧЕНИЕ ИЗОБРАЖЕНИЙ] Получено {len(images)} изображений")
            return images

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ИЗОБРАЖЕНИЙ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching images"
            ) from e

    @staticmethod
    async def get_image(image_id: str, db: AsyncSession) -> Image:
        try:
            image = await db.get(Image, image_id)

            if not image:
                logger.warning(f"[ПОЛУЧЕНИЕ ИЗОБРАЖЕНИЯ] Изображение не найдено: ID {image_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Image not found"
                )

            return image

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ИЗОБРАЖЕНИЯ] Ошибка базы данных для ID {image_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching image"
            ) from e

    @staticmethod
    async def delete_image(image_id: str, db: AsyncSession) -> bool:
        """
        Удаление изображения по ID (ссылки владельцев обнуляются внешним ключом).

        Raises:
            HTTPException: 404 - Изображение не найдено
            HTTPException: 500 - Ошибка базы данных
        """
        try:
            image = await ImageService.remove(image_id, db)

            if not image:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Image not found"
                )

            await db.commit()
            return True

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ ИЗОБРАЖЕНИЯ] Ошибка базы данных для ID {image_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting image"
            ) from e

    @staticmethod
    async def attach(owner, files: List[UploadFile], db: AsyncSession) -> None:
        """
        Привязка нового изображения профиля к владельцу (админ, преподаватель, студент).

        Первое загруженное изображение становится изображением профиля, предыдущее удаляется.
        Если новых файлов нет, владелец не меняется.
        """
        uploads = [file for file in files or [] if file and file.filename]
        if not uploads:
            return

        images = await ImageService.create(uploads[:1], db)
        previous_image_id = owner.image_id
        owner.image_id = images[0].id
        await db.flush()

        if previous_image_id:
            await ImageService.remove(previous_image_id, db)
