from .common import CamelModel


class ServiceCategoryResponse(CamelModel):
    id: int
    slug: str
    name_lv: str
    name_ru: str
    name_en: str
