import logging

from sqlalchemy import inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.models import ServiceCategory

logger = logging.getLogger(__name__)

# Canonical service categories: slug -> (lv, ru, en)
SERVICE_CATEGORIES: dict[str, tuple[str, str, str]] = {
    "cleaning": ("Uzkopšana", "Уборка", "Cleaning"),
    "plumbing": ("Santehnika", "Сантехника", "Plumbing"),
    "electrical": ("Elektrība", "Электрика", "Electrical"),
    "renovation": ("Remonts", "Ремонт", "Renovation"),
    "moving": ("Pārvākšanās", "Переезд", "Moving"),
    "gardening": ("Dārza darbi", "Садовые работы", "Gardening"),
    "beauty": ("Skaistumkopšana", "Красота", "Beauty"),
    "tutoring": ("Privātstundas", "Репетиторство", "Tutoring"),
    "it-support": ("IT atbalsts", "IT поддержка", "IT support"),
    "auto": ("Auto serviss", "Автосервис", "Car service"),
}


def seed_service_categories(engine: Engine) -> int:
    """Insert any missing categories from ``SERVICE_CATEGORIES``.

    Existing rows are left untouched so running this on every start is safe.
    Returns the number of rows inserted.
    """

    inspector = inspect(engine)
    if "service_categories" not in inspector.get_table_names():
        return 0

    with Session(engine) as session:
        existing = set(session.scalars(select(ServiceCategory.slug)))
        added = 0
        for slug, (name_lv, name_ru, name_en) in SERVICE_CATEGORIES.items():
            if slug in existing:
                continue
            session.add(
                ServiceCategory(slug=slug, name_lv=name_lv, name_ru=name_ru, name_en=name_en)
            )
            added += 1
        session.commit()
    if added:
        logger.info("Seeded %s service categories", added)
    return added
